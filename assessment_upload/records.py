from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from app.schemas import AssessmentRow, Category
from assessment_upload.options import normalize_options

PLACEHOLDER_TEXT = "Question text not found"
DEFAULT_QUESTION_TYPE = "mcq"
DEFAULT_ANSWER = "a"
DEFAULT_SUBJECT = "General"
DEFAULT_DIFFICULTY = "medium"

_last_stamp: Optional[datetime] = None


def _created_at() -> str:
    """UTC now, nudged forward so rows built in the same microsecond stay distinct."""
    global _last_stamp
    now = datetime.now(timezone.utc)
    if _last_stamp is not None and now <= _last_stamp:
        now = _last_stamp + timedelta(microseconds=1)
    _last_stamp = now
    return now.isoformat()


def _first(*values: Any) -> Any:
    for v in values:
        if v:
            return v
    return None


def build_row(
    question: Mapping[str, Any],
    filename: str,
    index: int,
    category: Category,
    description: Optional[str] = None,
) -> AssessmentRow:
    """
    RawQuestion + Category -> AssessmentRow.
    `index` is the 0-based position of the question inside its file.
    Reads the clock for created_at; no other side effects.
    """
    answer = _first(question.get("correct_answer"), question.get("answer")) or DEFAULT_ANSWER

    return AssessmentRow(
        class_level=category.class_level,
        stream=category.stream,
        course=category.course,
        year=category.year,
        question_id=str(question.get("question_id") or f"{filename}_{index + 1}"),
        question_text=str(_first(question.get("question_text"), question.get("text")) or PLACEHOLDER_TEXT),
        question_type=str(question.get("question_type") or DEFAULT_QUESTION_TYPE),
        options=normalize_options(question.get("options")),
        correct_answer=str(answer).lower(),
        subject=str(_first(question.get("subject"), description) or DEFAULT_SUBJECT),
        difficulty=str(question.get("difficulty") or DEFAULT_DIFFICULTY),
        explanation=str(question.get("explanation") or ""),
        created_at=_created_at(),
    )
