"""Uploaded resume file as received from the UI."""

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Immutable upload: raw bytes plus declared media type and filename."""

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(..., description="Raw file bytes")
    media_type: str = Field(default="", description="Declared MIME type (may be empty)")
    filename: str = Field(default="", description="Original filename, used for extension dispatch")
