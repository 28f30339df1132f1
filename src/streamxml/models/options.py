from __future__ import annotations
import codecs
from pydantic import BaseModel, Field, field_validator

class WriterOptions(BaseModel):
    pretty: bool = False
    indent: int = Field(2, ge=0)        # spaces per nesting level (pretty only)
    namespace: str | None = None        # prefix applied to element names
    encoding: str = "utf-8"

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding {v!r}") from e
        return v

    @field_validator("namespace")
    @classmethod
    def _non_empty_prefix(cls, v: str | None) -> str | None:
        if v is not None and not v:
            raise ValueError("namespace prefix must be non-empty or None")
        return v
