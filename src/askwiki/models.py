from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    INTERMEDIATE_ADVANCED = "intermediate-advanced"
    UNKNOWN = "unknown"


class Mode(str, Enum):
    GETTING_STARTED = "getting-started"
    COMPARISON = "comparison"
    OVERVIEW = "overview"
    NO_CONTENT = "no-content"


class FetchResult(ApiModel):
    """Uniform success/failure envelope from the summary service."""

    topic: str
    source: str = "wikipedia"
    ok: bool
    summary: str | None = None
    url: str | None = None
    error: str | None = None
    error_summary: str | None = None
    tried_topics: list[str] = Field(default_factory=list)
    page_id: int | None = None
    thumbnail: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_envelope(self) -> "FetchResult":
        if self.ok and (self.summary is None or self.url is None):
            raise ValueError("successful fetch requires summary and url")
        if not self.ok and (self.summary is not None or self.url is not None or not self.error):
            raise ValueError("failed fetch carries an error and no summary or url")
        return self


class AnalysisResult(ApiModel):
    has_content: bool
    difficulty: Difficulty
    key_points: list[str] = Field(default_factory=list)
    advisory: str

    @model_validator(mode="after")
    def _check_empty(self) -> "AnalysisResult":
        if not self.has_content and (self.difficulty is not Difficulty.UNKNOWN or self.key_points):
            raise ValueError("analysis without content must be unknown with no key points")
        return self


class TaskInfo(ApiModel):
    mode: Mode


class PipelineResponse(ApiModel):
    """Aggregate produced once per orchestration run."""

    query: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    research: FetchResult | None = None
    analysis: AnalysisResult | None = None
    task: TaskInfo
    final_answer: str
    error: bool = False
    error_message: str | None = None


class QueryRequest(BaseModel):
    query: StrictStr

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value


class ErrorResponse(BaseModel):
    query: str | None = None
    error: bool = True
    message: str
    details: Any = None
