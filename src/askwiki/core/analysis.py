import re
from typing import Final, Iterable

import structlog

from askwiki.config import settings
from askwiki.core.data import ADVANCED_TERMS, BEGINNER_TERMS
from askwiki.models import AnalysisResult, Difficulty, FetchResult

logger = structlog.get_logger(__name__)

NO_CONTENT_ADVISORY: Final[str] = "No research content was found to analyze."
ANALYSIS_FAILED_ADVISORY: Final[str] = "Analysis failed unexpectedly."

# A run of non-terminators closed by . ! or ? and then whitespace or end of text.
_SENTENCE = re.compile(r"[^.!?]+[.!?](?=\s|$)")


def split_sentences(summary: str) -> list[str]:
    sentences = _SENTENCE.findall(summary)
    return sentences or [summary]


def empty_analysis(advisory: str = NO_CONTENT_ADVISORY) -> AnalysisResult:
    return AnalysisResult(has_content=False, difficulty=Difficulty.UNKNOWN, key_points=[], advisory=advisory)


class ContentAnalyzer:
    """Pulls key points out of a summary and estimates how hard it reads."""

    def __init__(
        self,
        advanced_terms: Iterable[str] = ADVANCED_TERMS,
        beginner_terms: Iterable[str] = BEGINNER_TERMS,
        max_points: int | None = None,
        min_point_length: int | None = None,
        beginner_min_hits: int | None = None,
        advanced_min_hits: int | None = None,
        source_name: str | None = None,
    ) -> None:
        self.advanced_terms = frozenset(advanced_terms)
        self.beginner_terms = frozenset(beginner_terms)
        self.max_points = max_points if max_points is not None else settings.KEY_POINTS_LIMIT
        self.min_point_length = min_point_length if min_point_length is not None else settings.KEY_POINT_MIN_LENGTH
        self.beginner_min_hits = beginner_min_hits if beginner_min_hits is not None else settings.BEGINNER_MIN_HITS
        self.advanced_min_hits = advanced_min_hits if advanced_min_hits is not None else settings.ADVANCED_MIN_HITS
        self.advisory = (
            f"These points are based on an initial {source_name or settings.SOURCE_NAME} summary; "
            "always cross-check for critical or specific decisions."
        )

    def analyze(self, result: FetchResult) -> AnalysisResult:
        if not result.ok or not result.summary:
            logger.warning("analysis.no_content", topic=result.topic)
            return empty_analysis()

        summary = result.summary
        key_points = self.key_points(summary) or [summary]
        difficulty = self.difficulty(summary)

        logger.info("analysis.completed", topic=result.topic, key_points=len(key_points), difficulty=difficulty.value)
        return AnalysisResult(has_content=True, difficulty=difficulty, key_points=key_points, advisory=self.advisory)

    def key_points(self, summary: str) -> list[str]:
        candidates = (sentence.strip() for sentence in split_sentences(summary))
        return [sentence for sentence in candidates if len(sentence) > self.min_point_length][: self.max_points]

    def difficulty(self, summary: str) -> Difficulty:
        lowered = summary.lower()
        advanced_hits = sum(1 for term in self.advanced_terms if term in lowered)
        beginner_hits = sum(1 for term in self.beginner_terms if term in lowered)

        if beginner_hits > advanced_hits and beginner_hits >= self.beginner_min_hits:
            return Difficulty.BEGINNER
        if advanced_hits >= self.advanced_min_hits:
            return Difficulty.INTERMEDIATE_ADVANCED
        return Difficulty.INTERMEDIATE
