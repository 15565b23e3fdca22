"""FastAPI admin service for inspecting markets and scheduling market suspensions."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dex_admin.core.config import Settings, get_settings
from dex_admin.core.engine import MarketCore
from dex_admin.core.epoch_clock import EpochClockCore
from dex_admin.core.logging import configure_logging
from dex_admin.core.time_utils import utc_now
from dex_admin.services.admin.auth import AuthGate, require_admin
from dex_admin.services.admin.errors import AdminError
from dex_admin.services.admin.models import IndentedJSONResponse, MarketStatus, SuspendResult
from dex_admin.services.admin.status import PING_RESPONSE, StatusAggregator
from dex_admin.services.admin.suspend import SuspendScheduler

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

public_router = APIRouter()
read_router = APIRouter()
control_router = APIRouter()


def get_core(request: Request) -> MarketCore:
    return request.app.state.core


def get_aggregator(request: Request) -> StatusAggregator:
    return request.app.state.aggregator


def get_scheduler(request: Request) -> SuspendScheduler:
    return request.app.state.scheduler


@public_router.get("/ping")
def ping() -> str:
    """Return a constant liveness payload."""

    return PING_RESPONSE


@read_router.get("/config")
def config(core: MarketCore = Depends(get_core)) -> dict[str, Any]:
    """Return the engine's public configuration document."""

    return core.config_msg()


@read_router.get("/markets", response_model=dict[str, MarketStatus], response_model_exclude_none=True)
def markets(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, MarketStatus]:
    """Return the status of every market keyed by market name."""

    return aggregator.get_all()


@read_router.get("/market/{name}", response_model=MarketStatus, response_model_exclude_none=True)
def market_info(name: str, aggregator: StatusAggregator = Depends(get_aggregator)) -> MarketStatus:
    """Return the status of a single market."""

    return aggregator.get_one(name)


@control_router.get("/market/{name}/suspend", response_model=SuspendResult)
def suspend_market(
    name: str,
    t: str | None = Query(default=None, description="Suspend time in milliseconds since the Unix epoch."),
    persist: str | None = Query(default=None, description="Keep the order book across the suspension."),
    scheduler: SuspendScheduler = Depends(get_scheduler),
) -> SuspendResult:
    """Schedule a market suspension, immediately when no time is given."""

    return scheduler.suspend(name, t, persist)


@control_router.get("/suspend", response_model=dict[str, SuspendResult])
def suspend_all(
    t: str | None = Query(default=None, description="Suspend time in milliseconds since the Unix epoch."),
    persist: str | None = Query(default=None, description="Keep order books across the suspension."),
    scheduler: SuspendScheduler = Depends(get_scheduler),
) -> dict[str, SuspendResult]:
    """Schedule a suspension of every running market."""

    return scheduler.suspend_all(t, persist)


async def _admin_error_handler(_: Request, exc: AdminError) -> PlainTextResponse:
    return PlainTextResponse(f"{exc}\n", status_code=exc.status_code, headers=exc.headers)


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(f"{exc.detail}\n", status_code=exc.status_code, headers=exc.headers)


def create_app(
    core: MarketCore,
    app_settings: Settings,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """Build the admin application around a market core.

    Suspend endpoints always require the admin password. Status endpoints
    require it only when ADMIN_PROTECT_READS is set; /ping is always open.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "admin_startup",
            extra={
                "service": "admin",
                "env": app_settings.ENV,
                "version": app_settings.VERSION,
                "markets": sorted(core.list_markets()),
                "protect_reads": app_settings.ADMIN_PROTECT_READS,
            },
        )
        if not app.state.auth_gate.configured:
            logger.warning("admin_credential_missing", extra={"service": "admin"})
        yield

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.VERSION,
        lifespan=lifespan,
        default_response_class=IndentedJSONResponse,
    )
    app.state.core = core
    app.state.auth_gate = AuthGate(app_settings.admin_auth_digest())
    app.state.aggregator = StatusAggregator(core)
    app.state.scheduler = SuspendScheduler(core, clock=clock)

    app.add_exception_handler(AdminError, _admin_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    read_dependencies = [Depends(require_admin)] if app_settings.ADMIN_PROTECT_READS else []
    app.include_router(public_router)
    app.include_router(read_router, dependencies=read_dependencies)
    app.include_router(control_router, dependencies=[Depends(require_admin)])
    return app


app = create_app(EpochClockCore.from_settings(settings), settings)
