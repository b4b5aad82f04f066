
from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional

DEFAULT_MODE = "youtube"
MAX_QUERY_LENGTH = 180


class TagRequest(BaseModel):
    q: str = Field("", description="Free-text query to generate tags for (1-180 chars after trim)")
    mode: str = Field(DEFAULT_MODE, description="Target platform hint (e.g., 'youtube', 'tiktok')")

    @field_validator("q", mode="before")
    @classmethod
    def _coerce_query(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> str:
        return str(value or DEFAULT_MODE).strip().lower()


class TagResponse(BaseModel):
    tags: List[str]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
