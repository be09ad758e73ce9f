from enum import Enum
from typing import List
from pydantic import BaseModel, Field

class Dialect(str, Enum):
    SRT = "srt"
    VTT = "vtt"

class CaptionItem(BaseModel):
    id: int = Field(ge=1)
    start: float = Field(ge=0)
    end: float = Field(ge=0)
    text: str

class ParsedCaptions(BaseModel):
    text: str
    cues: List[CaptionItem]

class RenderedSubtitles(BaseModel):
    filename: str
    content: str
