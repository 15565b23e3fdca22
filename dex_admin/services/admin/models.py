"""Response payloads and JSON rendering for the admin API."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import JSONResponse


class MarketStatus(BaseModel):
    """Serializable market snapshot; suspension fields are None when nothing is scheduled."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = Field(default=None, alias="market")
    running: bool
    epoch_duration: int = Field(alias="epochlen", ge=0)
    active_epoch: int = Field(alias="activeepoch")
    start_epoch: int = Field(alias="startepoch")
    suspend_epoch: int | None = Field(default=None, alias="finalepoch")
    persist_book: bool | None = Field(default=None, alias="persistbook")


class SuspendResult(BaseModel):
    """Outcome of a scheduled suspension."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    market: str
    final_epoch: int = Field(alias="finalepoch")
    suspend_time: datetime = Field(alias="suspendtime")


class IndentedJSONResponse(JSONResponse):
    """JSON rendered with four-space indentation and a trailing newline."""

    media_type = "application/json; charset=utf-8"

    def render(self, content: Any) -> bytes:
        return (json.dumps(content, ensure_ascii=False, indent=4) + "\n").encode("utf-8")
