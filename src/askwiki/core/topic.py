import re
from dataclasses import dataclass
from typing import Final, Iterable

import structlog

from askwiki.core.data import FILLER_WORDS, PRICE_WORDS

logger = structlog.get_logger(__name__)

MIN_KEY_LENGTH: Final[int] = 3
SUBJECT_TOKENS: Final[int] = 2


@dataclass(frozen=True)
class QuestionForm:
    """A known question shape and where its subject phrase sits."""

    name: str
    pattern: re.Pattern[str]

    def subject(self, text: str) -> str | None:
        match = self.pattern.match(text)
        if not match:
            return None
        return match.group("subject")


QUESTION_FORMS: Final[tuple[QuestionForm, ...]] = (
    QuestionForm(
        "wh_copula",
        re.compile(r"^(?:who|what|where|when|why|how)\s+(?:is|was|are|were)\s+(?P<subject>.+)$", re.IGNORECASE),
    ),
    QuestionForm("tell_me_about", re.compile(r"^tell me about\s+(?P<subject>.+)$", re.IGNORECASE)),
    QuestionForm("overview_of", re.compile(r"^give me an overview of\s+(?P<subject>.+)$", re.IGNORECASE)),
)

_PUNCTUATION = re.compile(r"[^\w\s]")


def normalize_title(phrase: str) -> str:
    """Turn a phrase into a Wikipedia-style title: ``mahatma gandhi`` -> ``Mahatma_Gandhi``."""
    words = phrase.strip().replace("?", "").split()
    return "_".join(word[:1].upper() + word[1:] for word in words)


class TopicExtractor:
    """Derives a lookup key from a free-text question.

    Known question forms are tried in order and the first match wins. Filler
    and price words are dropped and the last two remaining tokens are kept,
    since the grammatical head noun tends to come last. When no form matches
    a keyword fallback runs over the whole query, and as a last resort the
    original query is normalized as-is.
    """

    def __init__(
        self,
        filler_words: Iterable[str] = FILLER_WORDS,
        price_words: Iterable[str] = PRICE_WORDS,
        forms: tuple[QuestionForm, ...] = QUESTION_FORMS,
    ) -> None:
        self.filler_words = frozenset(filler_words)
        self.price_words = frozenset(price_words)
        self.forms = forms

    def extract(self, query: str) -> str:
        trimmed = query.strip()
        if not trimmed:
            return normalize_title(query)

        for form in self.forms:
            subject = form.subject(trimmed)
            if subject is None:
                continue
            key = self._from_subject(subject)
            if len(key) >= MIN_KEY_LENGTH:
                logger.debug("topic.extracted", form=form.name, key=key)
                return key
            break

        key = self._from_keywords(trimmed)
        if key:
            logger.debug("topic.extracted", form="keywords", key=key)
            return key

        logger.warning("topic.fallback_to_query", query=query)
        return normalize_title(query)

    def _from_subject(self, subject: str) -> str:
        phrase = subject.replace("?", "").strip()
        tokens = [token for token in phrase.lower().split() if not self._is_noise(token)]
        if tokens:
            phrase = " ".join(tokens[-SUBJECT_TOKENS:])
        return normalize_title(phrase)

    def _from_keywords(self, text: str) -> str:
        words = [word for word in _PUNCTUATION.sub("", text.lower()).split() if word not in self.filler_words]
        filtered = [word for word in words if word not in self.price_words]
        candidate = (filtered or words)[-SUBJECT_TOKENS:]
        if len("_".join(candidate)) < MIN_KEY_LENGTH:
            return ""
        return normalize_title(" ".join(candidate))

    def _is_noise(self, token: str) -> bool:
        return token in self.filler_words or token in self.price_words
