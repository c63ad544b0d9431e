from typing import Final, Iterable

from askwiki.config import settings
from askwiki.core.data import COMPARISON_CUES, GETTING_STARTED_CUES
from askwiki.models import AnalysisResult, FetchResult, Mode

NO_TOPICS_PLACEHOLDER: Final[str] = "No candidate topics were generated"
SUGGESTIONS: Final[tuple[str, ...]] = (
    "Try using a broader or simpler topic (remove prices, dates, or very local details).",
    "Check spelling for names or technical terms.",
    "If your question is about a very specific product or version, try asking about the general concept instead.",
)
NEXT_STEPS: Final[tuple[str, ...]] = (
    "**Read the Official Docs:** Start with the main documentation page linked below.",
    '**Try a Simple Tutorial:** Search for a "Hello World" or equivalent first project.',
    "**Understand Core Concepts:** Ensure you grasp the basic principles "
    "(e.g., if it's a tech topic, what is its primary problem domain?).",
)


class IntentClassifier:
    """Picks a presentation mode from lexical cues in the query."""

    def __init__(
        self,
        getting_started_cues: Iterable[str] = GETTING_STARTED_CUES,
        comparison_cues: Iterable[str] = COMPARISON_CUES,
    ) -> None:
        self.getting_started_cues = tuple(getting_started_cues)
        self.comparison_cues = tuple(comparison_cues)

    def classify(self, query: str, has_content: bool) -> Mode:
        if not has_content:
            return Mode.NO_CONTENT

        lowered = query.lower()
        if any(cue in lowered for cue in self.getting_started_cues):
            return Mode.GETTING_STARTED
        if any(cue in lowered for cue in self.comparison_cues):
            return Mode.COMPARISON
        return Mode.OVERVIEW


class AnswerRenderer:
    """Formats the final Markdown answer for a given mode."""

    def __init__(self, source_name: str | None = None) -> None:
        self.source_name = source_name or settings.SOURCE_NAME

    def render(self, query: str, research: FetchResult | None, analysis: AnalysisResult, mode: Mode) -> str:
        if mode is Mode.NO_CONTENT or research is None:
            return self.render_no_content(query, research)

        topic = research.topic
        difficulty = analysis.difficulty.value
        difficulty_text = difficulty[:1].upper() + difficulty[1:]

        lines = [f"## 📚 {topic}", ""]
        if mode is Mode.GETTING_STARTED:
            lines += [
                "**Presentation Mode: GETTING STARTED**",
                "",
                f"Welcome! The topic of **{topic}** has been identified with a complexity level of: "
                f"**{difficulty_text}**.",
                "",
                "To start your learning journey, focus on the fundamentals outlined below:",
                "",
            ]
            lines += [f"- **{point}**" for point in analysis.key_points]
            lines += ["", "---", "", "### 💡 Suggested Next Steps"]
            lines += [f"* {step}" for step in NEXT_STEPS]
            lines.append("")
        elif mode is Mode.COMPARISON:
            lines += [
                "**Presentation Mode: COMPARISON**",
                "",
                f"Here is an **Overview** of **{topic}** to help you start your comparison "
                f"(Difficulty: **{difficulty_text}**):",
                "",
            ]
            lines += [f"* {point}" for point in analysis.key_points]
            lines += [
                "",
                "---",
                "",
                "For a detailed comparison, you'll need to research its key alternatives and competitors. "
                "The points above provide its core foundation.",
                "",
            ]
        else:
            lines += [
                "**Presentation Mode: OVERVIEW**",
                "",
                f"Here's a high-level overview of **{topic}** (Difficulty: **{difficulty_text}**):",
                "",
            ]
            lines += [f"* {point}" for point in analysis.key_points]

        lines += [
            "",
            "---",
            f"**Source URL:** [{self.source_name}: {topic}]({research.url})",
            f"**Advisory:** *{analysis.advisory}*",
            "",
        ]
        return "\n".join(lines)

    def render_no_content(self, query: str, research: FetchResult | None) -> str:
        if research is not None and research.tried_topics:
            topics_tried = ", ".join(research.tried_topics)
        elif research is not None and research.topic:
            topics_tried = research.topic
        else:
            topics_tried = NO_TOPICS_PLACEHOLDER

        reason = None
        if research is not None:
            reason = research.error_summary or research.error
        reason = reason or f"No suitable {self.source_name} article was found for this query."

        lines = [
            "## ❌ No Content Found",
            "",
            f"The agent pipeline could not build an answer from {self.source_name} for your question.",
            "",
            f"Query: {query}",
            f"Topics tried: {topics_tried}",
            f"Reason: {reason}",
            "",
            "Suggestions:",
        ]
        lines += [f"- {suggestion}" for suggestion in SUGGESTIONS]
        return "\n".join(lines)
