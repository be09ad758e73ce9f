from pydantic import BaseModel, Field

class RawTranscriptSegment(BaseModel):
    text: str
    offset_ms: int = Field(ge=0)
    duration_ms: int = Field(ge=0)
