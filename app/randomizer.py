import random
from typing import Any, Dict, List, Optional

LETTERS = ("a", "b", "c", "d", "e")


def _seeded_rng(user: str, test_id: str) -> random.Random:
    # 같은 (user, test) 조합이면 항상 같은 순서
    return random.Random(f"{user}_{test_id}")


def _shuffle_options(question: Dict[str, Any], rng: random.Random) -> Dict[str, Any]:
    options = question.get("options") or {}
    if not options:
        return dict(question)

    entries = list(options.items())
    rng.shuffle(entries)

    new_options = {}
    new_answer = question.get("correct_answer")
    for letter, (original_key, text) in zip(LETTERS, entries):
        new_options[letter] = text
        if original_key == question.get("correct_answer"):
            new_answer = letter

    out = dict(question)
    out["options"] = new_options
    out["correct_answer"] = new_answer
    return out


def randomize_for_user(
    questions: List[Dict[str, Any]],
    user: str,
    test_id: str,
    max_questions: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Per-user deterministic exam: shuffles question order, then each question's
    options, re-lettering them a..e and remapping correct_answer to the new letter.
    """
    if not questions:
        return []

    rng = _seeded_rng(user, test_id)
    shuffled = list(questions)
    rng.shuffle(shuffled)

    if max_questions and max_questions < len(shuffled):
        shuffled = shuffled[:max_questions]

    return [_shuffle_options(q, rng) for q in shuffled]
