"""Admin request failures, each carrying the HTTP status it is reported with."""


class AdminError(Exception):
    """Base class for failures reported to the caller as a plain-text response."""

    status_code = 400

    def __init__(self, message: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.headers = headers


class UnknownMarketError(AdminError):
    """The core has no market with the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'unknown market "{name}"')
        self.name = name


class MarketNotRunningError(AdminError):
    """The market exists but is not matching orders."""

    def __init__(self, name: str) -> None:
        super().__init__(f'market "{name}" not running')
        self.name = name


class InvalidSuspendTimeError(AdminError):
    """The t parameter is not a usable millisecond timestamp."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f'invalid suspend time "{raw}": {reason}')


class SuspendTimeInPastError(AdminError):
    """The requested suspend time is not after now."""

    def __init__(self, suspend_time: str) -> None:
        super().__init__(f"specified market suspend time is in the past: {suspend_time}")


class InvalidPersistFlagError(AdminError):
    """The persist parameter is outside the accepted literals."""

    def __init__(self, raw: str) -> None:
        super().__init__(f'invalid persist book boolean "{raw}": expected one of true, false, 1, 0')


class UnauthorizedError(AdminError):
    """Missing or wrong admin password; carries the Basic challenge header."""

    status_code = 401

    def __init__(self, realm: str) -> None:
        super().__init__("unauthorized", headers={"WWW-Authenticate": f'Basic realm="{realm}"'})


class SuspendFailedError(AdminError):
    """The core refused a suspension that passed validation."""

    status_code = 500

    def __init__(self, name: str) -> None:
        super().__init__(f'failed to suspend market "{name}"')
        self.name = name
