"""Closed set of question type tags.

Plain string constants: stored values and JSON payloads are bare strings.
"""

from __future__ import annotations


class QuestionKind:
    SCALE = "scale"
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple_choice"

    ALL = (SCALE, TEXT, MULTIPLE_CHOICE)


__all__ = ["QuestionKind"]
