from typing import Final

# Topic extraction
FILLER_WORDS: Final[frozenset[str]] = frozenset(
    {
        "explain",
        "what",
        "is",
        "are",
        "for",
        "a",
        "an",
        "the",
        "of",
        "in",
        "to",
        "how",
        "do",
        "i",
        "get",
        "started",
        "beginners",
        "learn",
        "compare",
        "vs",
        "overview",
        "tell",
        "me",
        "about",
        "please",
    }
)
PRICE_WORDS: Final[frozenset[str]] = frozenset({"cost", "price", "new", "average", "car", "buy"})

# Difficulty inference
ADVANCED_TERMS: Final[frozenset[str]] = frozenset(
    {
        "cluster",
        "orchestration",
        "distributed",
        "concurrency",
        "containerization",
        "scalability",
        "stateless",
        "latency",
        "asynchronous",
        "pipeline",
        "microservices",
    }
)
BEGINNER_TERMS: Final[frozenset[str]] = frozenset(
    {"introduction", "basic", "getting started", "simple", "fundamental", "beginner"}
)

# Intent classification
GETTING_STARTED_CUES: Final[tuple[str, ...]] = ("how to", "how do i", "get started", "for beginners", "learn")
COMPARISON_CUES: Final[tuple[str, ...]] = ("compare", " vs ")
