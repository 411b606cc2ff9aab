"""Typed failure raised by the JSON recovery pipeline."""
from __future__ import annotations

_EXCERPT_MAX = 300  # chars; keeps error messages bounded


class ParseFailure(ValueError):
    """Raised when no recovery strategy could produce a JSON value.

    Attributes:
        stage:      Pipeline stage that gave up: "input", "strategies" or "shape".
        last_error: Message of the last failed attempt.
        excerpt:    Leading slice of the text that was being parsed.
    """

    def __init__(self, stage: str, last_error: str, excerpt: str = "") -> None:
        self.stage = stage
        self.last_error = last_error
        self.excerpt = excerpt[:_EXCERPT_MAX]
        super().__init__(f"ERROR: JSON recovery failed at {stage}: {last_error}")
