from __future__ import annotations
from pydantic import BaseModel

class NamespaceDecl(BaseModel):
    prefix: str | None = None   # None -> default namespace (plain xmlns)
    uri: str

    @property
    def attr_name(self) -> str:
        return "xmlns" if self.prefix is None else f"xmlns:{self.prefix}"

    @classmethod
    def coerce(cls, item: "NamespaceDecl | tuple[str | None, str]") -> "NamespaceDecl":
        if isinstance(item, NamespaceDecl):
            return item
        prefix, uri = item
        return cls(prefix=prefix, uri=uri)
