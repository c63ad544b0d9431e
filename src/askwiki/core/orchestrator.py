from time import perf_counter
from typing import Final

import structlog

from askwiki.core.analysis import ANALYSIS_FAILED_ADVISORY, ContentAnalyzer, empty_analysis
from askwiki.core.answer import AnswerRenderer, IntentClassifier
from askwiki.core.topic import TopicExtractor
from askwiki.models import AnalysisResult, FetchResult, Mode, PipelineResponse, TaskInfo
from askwiki.utils.wiki_client import SOURCE, SummaryFetcher

logger = structlog.get_logger(__name__)

RESEARCH_FAILED: Final[str] = "Research step failed unexpectedly."
PLANNING_FAILED: Final[str] = "Task planning failed unexpectedly."
NO_TOPIC: Final[str] = "no topic could be derived from the query"


class Orchestrator:
    """Runs extract -> fetch -> analyze -> classify/render for one query.

    A failure while researching or planning ends the run with an ``error``
    response; a failure while analyzing degrades to an empty analysis and the
    run continues. ``orchestrate`` itself never raises.
    """

    def __init__(
        self,
        extractor: TopicExtractor | None = None,
        fetcher: SummaryFetcher | None = None,
        analyzer: ContentAnalyzer | None = None,
        classifier: IntentClassifier | None = None,
        renderer: AnswerRenderer | None = None,
    ) -> None:
        self.extractor = extractor or TopicExtractor()
        self.fetcher = fetcher or SummaryFetcher()
        self.analyzer = analyzer or ContentAnalyzer()
        self.classifier = classifier or IntentClassifier()
        self.renderer = renderer or AnswerRenderer()

    async def orchestrate(self, query: str) -> PipelineResponse:
        started = perf_counter()
        logger.info("pipeline.start", query=query)

        try:
            research = await self.research(query)
        except Exception as exc:  # noqa: BLE001
            logger.exception("pipeline.research.failed", query=query, error=str(exc))
            return PipelineResponse(
                query=query,
                task=TaskInfo(mode=Mode.NO_CONTENT),
                final_answer=(
                    "## ❌ No Content Found\n\n"
                    f'The research step encountered an unexpected error while processing your query: "{query}".'
                ),
                error=True,
                error_message=RESEARCH_FAILED,
            )

        try:
            analysis = self.analyzer.analyze(research)
        except Exception as exc:  # noqa: BLE001
            logger.exception("pipeline.analysis.failed", query=query, error=str(exc))
            analysis = empty_analysis(ANALYSIS_FAILED_ADVISORY)

        try:
            mode = self.classifier.classify(query, analysis.has_content)
            final_answer = self.renderer.render(query, research, analysis, mode)
        except Exception as exc:  # noqa: BLE001
            logger.exception("pipeline.planning.failed", query=query, error=str(exc))
            return self._planning_failure(query, research, analysis)

        duration_ms = (perf_counter() - started) * 1000
        logger.info(
            "pipeline.completed",
            query=query,
            topic=research.topic,
            mode=mode.value,
            difficulty=analysis.difficulty.value,
            duration_ms=duration_ms,
        )
        return PipelineResponse(
            query=query,
            research=research,
            analysis=analysis,
            task=TaskInfo(mode=mode),
            final_answer=final_answer,
        )

    async def research(self, query: str) -> FetchResult:
        key = self.extractor.extract(query)
        if not any(char.isalnum() for char in key):
            logger.warning("pipeline.research.no_topic", query=query)
            return FetchResult(topic=key, source=SOURCE, ok=False, error=NO_TOPIC)
        return await self.fetcher.fetch_with_fallback(key)

    def _planning_failure(self, query: str, research: FetchResult, analysis: AnalysisResult) -> PipelineResponse:
        return PipelineResponse(
            query=query,
            research=research,
            analysis=analysis,
            task=TaskInfo(mode=Mode.NO_CONTENT),
            final_answer=f'An internal error prevented generating a final answer for the query: "{query}".',
            error=True,
            error_message=PLANNING_FAILED,
        )
