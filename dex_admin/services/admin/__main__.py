"""Module entrypoint for running the admin service over TLS with shared settings."""

import uvicorn

from dex_admin.core.config import get_settings


def main() -> int:
    """Run the admin service on the configured address and certificate pair."""

    settings = get_settings()
    tls = settings.tls_files()
    uvicorn.run(
        "dex_admin.services.admin.main:app",
        host=settings.HOST,
        port=settings.PORT,
        ssl_certfile=tls[0] if tls else None,
        ssl_keyfile=tls[1] if tls else None,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
