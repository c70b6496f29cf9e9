"""Schemas for the ViewEngine MCP retrieval endpoints. Wire names are camelCase."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from viewengine.core.config import RETRIEVAL_TIMEOUT_SECONDS

RetrievalMode = Literal["private", "community"]

STATUS_COMPLETE = "complete"
STATUS_FAILED = "failed"
STATUS_CANCELED = "canceled"
# Any status outside this set means the job is still in progress
TERMINAL_STATUSES: frozenset[str] = frozenset({STATUS_COMPLETE, STATUS_FAILED, STATUS_CANCELED})

_MODEL_CONFIG = {"frozen": True, "populate_by_name": True}


class ToolDescriptor(BaseModel):
    """One entry of GET /v1/mcp/tools."""

    name: str = Field(..., description="Tool name.")
    description: str = Field("", description="Human-readable description of the tool.")

    model_config = _MODEL_CONFIG

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, value: Any) -> Any:
        return "" if value is None else value


class RetrievalRequest(BaseModel):
    """Request body for POST /v1/mcp/retrieve."""

    url: str = Field(..., min_length=1, description="Page to retrieve.")
    timeout_seconds: int = Field(
        RETRIEVAL_TIMEOUT_SECONDS,
        alias="timeoutSeconds",
        description="Server-side job timeout. Always sent as 60 by the client.",
    )
    force_refresh: bool = Field(False, alias="forceRefresh", description="Bypass the service cache.")
    mode: RetrievalMode = Field("private", description="Processing profile: private or community.")

    model_config = {
        **_MODEL_CONFIG,
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com", "timeoutSeconds": 60, "forceRefresh": False, "mode": "private"}
            ]
        },
    }


class RetrievalAck(BaseModel):
    """Response of POST /v1/mcp/retrieve. request_id is the correlation key for polling."""

    request_id: str = Field(..., alias="requestId", min_length=1)
    status: str | None = None
    estimated_wait_time_seconds: int = Field(0, alias="estimatedWaitTimeSeconds")

    model_config = _MODEL_CONFIG

    @field_validator("estimated_wait_time_seconds", mode="before")
    @classmethod
    def _null_wait(cls, value: Any) -> Any:
        return 0 if value is None else value


class ContentInfo(BaseModel):
    """Content produced by a completed job."""

    page_data_url: str = Field(..., alias="pageDataUrl", description="Absolute URL of the page data JSON.")
    content_hash: str = Field("", alias="contentHash")
    artifacts: dict[str, Any] = Field(default_factory=dict, description="Derived outputs keyed by name.")
    metrics: dict[str, Any] = Field(default_factory=dict)

    model_config = _MODEL_CONFIG

    # The service sends null for empty values
    @field_validator("content_hash", mode="before")
    @classmethod
    def _null_hash(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("artifacts", "metrics", mode="before")
    @classmethod
    def _null_mapping(cls, value: Any) -> Any:
        return {} if value is None else value


class RetrievalResult(BaseModel):
    """Response of GET /v1/mcp/retrieve/{requestId}. content is only set when status is complete."""

    status: str
    message: str | None = None
    url: str | None = None
    # Kept as the service formats it (ISO 8601, up to 7 fractional digits)
    completed_at: str | None = Field(None, alias="completedAt")
    error: str | None = None
    content: ContentInfo | None = None

    model_config = _MODEL_CONFIG

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE
