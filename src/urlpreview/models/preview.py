"""Core data models for probing, acquisition and preview results."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOOPBACK_HOST = "127.0.0.1"

AcquiredVia = Literal["fetch", "browser"]
PreviewMode = Literal["frame", "rewritten", "error"]


class EmbedDecision(StrEnum):
    """Whether a page may be displayed directly inside a frame."""

    EMBEDDABLE = "embeddable"
    NOT_EMBEDDABLE = "not_embeddable"


class PreviewState(StrEnum):
    """Steps of a single preview invocation."""

    IDLE = "idle"
    PROBING = "probing"
    DIRECT_EMBED = "direct_embed"
    ACQUIRING = "acquiring"
    REWRITING = "rewriting"
    DISPLAYED = "displayed"


class ProbeResult(BaseModel):
    """Status and headers returned by a HEAD (or fallback GET) request.

    Header names are lowercased on validation so lookups never depend on the
    casing the origin server used.
    """

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    method: Literal["HEAD", "GET"] = "HEAD"
    url: str | None = None

    @field_validator("headers", mode="before")
    @classmethod
    def _lowercase_names(cls, value: object) -> object:
        if isinstance(value, dict):
            return {str(name).lower(): str(item) for name, item in value.items()}
        return value

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


class RenderedDocument(BaseModel):
    """Markup acquired for a target URL, by plain fetch or headless browser."""

    html: str
    source_url: str
    via: AcquiredVia = "fetch"


class RelayBinding(BaseModel):
    """Address the local relay listener is bound to."""

    model_config = ConfigDict(frozen=True)

    host: str = LOOPBACK_HOST
    port: int = Field(ge=1, le=65535)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def proxy_url(self, target: str) -> str:
        return f"{self.base_url}/proxy?url={quote(target, safe='')}"


class PreviewResult(BaseModel):
    """Outcome of one preview invocation: the document handed to the viewer."""

    url: str
    decision: EmbedDecision | None = None
    mode: PreviewMode
    html: str
    states: list[PreviewState] = Field(default_factory=list)
    error: str | None = None
