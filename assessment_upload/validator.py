from typing import List

from app.schemas import AssessmentRow
from assessment_upload.options import OPTION_LETTERS

MAX_OPTIONS = len(OPTION_LETTERS)


def check_row(row: AssessmentRow) -> List[str]:
    """
    AssessmentRow 불변조건 검사.
    - options: 최대 5개, 키는 a..e
    - correct_answer: 소문자
    위반 시 ValueError, 통과하면 경고 메시지 목록(비어 있을 수 있음)을 반환
    """
    qid = row.question_id

    if len(row.options) > MAX_OPTIONS:
        raise ValueError(f"id={qid} has {len(row.options)} options (max {MAX_OPTIONS})")

    bad_keys = [k for k in row.options if k not in OPTION_LETTERS]
    if bad_keys:
        raise ValueError(f"id={qid} option keys outside a..e: {bad_keys}")

    if row.correct_answer != row.correct_answer.lower():
        raise ValueError(f"id={qid} correct_answer is not lowercase: {row.correct_answer!r}")

    warnings: List[str] = []
    if row.options and row.correct_answer not in row.options:
        warnings.append(f"id={qid} correct_answer {row.correct_answer!r} not among option keys")

    # Rough corruption check: replacement char
    texts = [row.question_text] + [v for v in row.options.values() if isinstance(v, str)]
    if any("�" in t for t in texts):
        warnings.append(f"id={qid} contains replacement character; check source encoding")

    return warnings
