"""Environment-driven settings for the admin server and the epoch clock core."""

import hashlib
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Admin server settings loaded from environment variables or a local .env file."""

    APP_NAME: str = "DEX Admin"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    VERSION: str = "0.1.0"
    HOST: str = "127.0.0.1"
    PORT: int = 6542
    TLS_CERT_PATH: str = ""
    TLS_KEY_PATH: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_AUTH_SHA256: str = ""
    ADMIN_PROTECT_READS: bool = False
    MARKETS: str = "dcr_btc:60000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def admin_auth_digest(self) -> bytes | None:
        """Return the SHA-256 digest of the admin secret, or None when unset."""

        hex_digest = self.ADMIN_AUTH_SHA256.strip()
        if hex_digest:
            try:
                digest = bytes.fromhex(hex_digest)
            except ValueError as exc:
                raise ValueError("ADMIN_AUTH_SHA256 is not valid hex") from exc
            if len(digest) != hashlib.sha256().digest_size:
                raise ValueError(
                    f"ADMIN_AUTH_SHA256 must be {hashlib.sha256().digest_size} bytes, got {len(digest)}"
                )
            return digest

        if self.ADMIN_PASSWORD:
            return hashlib.sha256(self.ADMIN_PASSWORD.encode("utf-8")).digest()

        return None

    def tls_files(self) -> tuple[str, str] | None:
        """Return the (cert, key) pair, or None to serve plain HTTP."""

        cert = self.TLS_CERT_PATH.strip()
        key = self.TLS_KEY_PATH.strip()
        if not cert and not key:
            return None
        if not cert or not key:
            raise ValueError("TLS_CERT_PATH and TLS_KEY_PATH must be set together")
        return cert, key

    def market_epochs(self) -> dict[str, int]:
        """Return epoch durations in milliseconds keyed by market name from MARKETS."""

        epochs: dict[str, int] = {}
        for raw in self.MARKETS.split(","):
            entry = raw.strip()
            if not entry:
                continue

            name, sep, duration = entry.partition(":")
            name = name.strip().lower()
            if not sep or not name:
                raise ValueError(f"invalid MARKETS entry {entry!r}, expected name:epoch_ms")
            try:
                epoch_ms = int(duration)
            except ValueError as exc:
                raise ValueError(f"invalid epoch duration in MARKETS entry {entry!r}") from exc
            if epoch_ms <= 0:
                raise ValueError(f"epoch duration must be positive in MARKETS entry {entry!r}")
            if name in epochs:
                continue
            epochs[name] = epoch_ms

        return epochs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings to avoid repeated environment parsing."""

    return Settings()
