from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional

class Chunk(BaseModel):
    fourcc: str = Field(..., min_length=4, max_length=4)
    size: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)          # absolute offset of the chunk header
    form: Optional[str] = None              # list type for LIST chunks
    data: bytes = b""
    children: List["Chunk"] = Field(default_factory=list)

class RiffFile(BaseModel):
    form: str
    size: int = Field(..., ge=4)
    chunks: List[Chunk] = Field(default_factory=list)

    def find(self, fourcc: str) -> Optional[Chunk]:
        stack = list(self.chunks)
        while stack:
            c = stack.pop(0)
            if c.fourcc == fourcc:
                return c
            stack[:0] = c.children
        return None

Chunk.model_rebuild()
