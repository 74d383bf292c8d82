"""
Route models.
Owns: Message schemas exchanged with the router.

Payloads are opaque beyond the fields named here; everything else a
caller or the router adds is passed through untouched.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    uuid: str
    # Opaque pass-through bag; usually an object, but any JSON value is echoed back as-is
    request_metadata: Any = Field(default_factory=dict, alias="requestMetadata")


class InboundMessage(BaseModel):
    """
    Message handed to the router's ``heard``.

    ``userId`` / ``sessionId`` are only set when the request metadata
    carried them; unset fields are left out of the payload entirely.
    """
    model_config = ConfigDict(populate_by_name=True)

    input: Any
    metadata: MessageMetadata
    user_id: Any = Field(default=None, alias="userId")
    session_id: Any = Field(default=None, alias="sessionId")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class OutboundReply(BaseModel):
    """Reply delivered by the router through ``speak``."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    output: Any = None
    metadata: MessageMetadata

    @property
    def correlation_token(self) -> str:
        return self.metadata.uuid

    @property
    def request_metadata(self) -> Any:
        return self.metadata.request_metadata


class HealthResponse(BaseModel):
    status: str
    ready: bool
    pending: int
