from typing import Optional
from pydantic import BaseModel

class Suggestion(BaseModel):
    start: int
    end: int
    original: str
    replacement: str
    reason: Optional[str] = None
