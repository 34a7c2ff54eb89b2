from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict

OPTION_LETTERS = ("a", "b", "c", "d", "e")
IDENTIFIER_FIELD = "option_id"
TEXT_FIELD = "text"


class OptionShape(str, Enum):
    EMPTY = "empty"
    IDENTIFIED = "identified"  # [{"option_id": "A", "text": "Mars"}, ...]
    PLAIN = "plain"            # ["Mars", "Jupiter", ...]
    MAPPING = "mapping"        # {"a": "Mars", ...}


def classify_options(raw: Any) -> OptionShape:
    if isinstance(raw, Mapping):
        return OptionShape.MAPPING if raw else OptionShape.EMPTY
    if isinstance(raw, (list, tuple)):
        if not raw:
            return OptionShape.EMPTY
        first = raw[0]
        if isinstance(first, Mapping) and first.get(IDENTIFIER_FIELD):
            return OptionShape.IDENTIFIED
        return OptionShape.PLAIN
    return OptionShape.EMPTY


def _option_text(item: Any) -> str:
    if isinstance(item, Mapping):
        return str(item.get(TEXT_FIELD, ""))
    return item if isinstance(item, str) else str(item)


def normalize_options(raw: Any) -> Dict[str, str]:
    """
    Convert any supported options shape into a lettered map (a..e).

    - IDENTIFIED: key = option_id.lower(), later duplicates overwrite earlier ones;
      ids outside a..e and items without an id are dropped
    - PLAIN: letters assigned by position, anything past the 5th item is dropped
    - MAPPING: returned unchanged
    - EMPTY (None, [], {}, scalars): {}
    """
    shape = classify_options(raw)

    if shape is OptionShape.MAPPING:
        return raw

    if shape is OptionShape.IDENTIFIED:
        out: Dict[str, str] = {}
        for item in raw:
            if not isinstance(item, Mapping) or not item.get(IDENTIFIER_FIELD):
                continue
            key = str(item[IDENTIFIER_FIELD]).strip().lower()
            if key not in OPTION_LETTERS:
                continue
            out[key] = _option_text(item)
        return out

    if shape is OptionShape.PLAIN:
        return {letter: _option_text(item) for letter, item in zip(OPTION_LETTERS, raw)}

    return {}
