"""Review request and result models."""
import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class ReviewRequest:
    """Code submitted for review."""
    source_code: str
    language_id: str


class ReviewResult(BaseModel):
    """Structured review returned by the provider.

    Any JSON object is accepted: null or oddly typed fields are coerced
    instead of rejected, and unknown fields are kept and passed through.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    summary: str | None = ""
    score: int | float | str | None = None
    bugs: list[Any] = Field(default_factory=list)
    optimizations: list[Any] = Field(default_factory=list)
    security: list[Any] = Field(default_factory=list)
    improved_code: str | None = Field(default=None, alias="improvedCode")
    positives: list[Any] = Field(default_factory=list)

    @field_validator("bugs", "optimizations", "security", "positives", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return value
        return [value]

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_summary(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Any:
        if value is None or isinstance(value, (int, float, str)):
            return value
        return None

    @field_validator("improved_code", mode="before")
    @classmethod
    def _coerce_improved_code(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return str(value)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the wire field names, leaving out fields never set."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ReviewRequestBody(BaseModel):
    """JSON body of POST /api/review.

    Fields are optional so missing values are reported as 400, not 422.
    """

    code: str | None = None
    language: str | None = None
