from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Dict, List

class BlobState(BaseModel):
    pos: int
    offset: int = Field(..., ge=0)
    absolute: int
    length: int = Field(..., ge=0)
    markers: Dict[str, int] = Field(default_factory=dict)
    stack: List[int] = Field(default_factory=list)
    local_types: List[str] = Field(default_factory=list)
