from types import MappingProxyType
from typing import List, Mapping

from app.schemas import Category

CLASS_LEVELS = ("10", "11", "12", "UG", "general")

# 11th12th 파일은 한 파일로 11, 12 두 학년치 행을 만든다
COMBINED_MARKER = "11th12th"
SECOND_LEVEL_SUFFIX = "_12"


def _c(class_level, stream, course=None, year=None) -> Category:
    return Category(class_level=class_level, stream=stream, course=course, year=year)


def _combined(filename: str, stream: str, course: str) -> dict:
    return {
        filename: _c("11", stream, course),
        filename + SECOND_LEVEL_SUFFIX: _c("12", stream, course),
    }


_TABLE = {
    # Class 10
    "Academic_Test_10th_Arts.json": _c("10", "Arts"),
    "Academic_Test_10th_Commerce.json": _c("10", "Commerce"),
    "Academic_Test_10th_Science.json": _c("10", "Science"),

    # Class 11/12 (key + key_12)
    **_combined("Academic_Test_11th12th_Arts_BA.json", "Arts", "BA"),
    **_combined("Academic_Test_11th12th_Arts_BEd.json", "Arts", "BEd"),
    **_combined("Academic_Test_11th12th_Arts_BFA.json", "Arts", "BFA"),
    **_combined("Academic_Test_11th12th_Arts_MassComm.json", "Arts", "Mass Communication"),
    **_combined("Academic_Test_11th12th_Commerce_BBA.json", "Commerce", "BBA"),
    **_combined("Academic_Test_11th12th_Commerce_BCom.json", "Commerce", "BCom"),
    **_combined("Academic_Test_11th12th_Commerce_BMS.json", "Commerce", "BMS"),
    **_combined("Academic_Test_11th12th_Commerce_CAFoundation.json", "Commerce", "CA Foundation"),
    **_combined("Academic_Test_11th12th_Science_BCA.json", "Science", "BCA"),
    **_combined("Academic_Test_11th12th_Science_BCS.json", "Science", "BCS"),
    **_combined("Academic_Test_11th12th_Science_BTech.json", "Science", "BTech"),
    **_combined("Academic_Test_11th12th_Science_MBBS.json", "Science", "MBBS"),

    # UG (first year)
    "Academic_Test_UGBBA.json": _c("UG", "Commerce", "BBA", "1"),
    "Academic_Test_UG_Arts_BEd.json": _c("UG", "Arts", "BEd", "1"),
    "Academic_Test_UG_Arts_MassComm.json": _c("UG", "Arts", "Mass Communication", "1"),
    "Academic_Test_UG_Commerce_BBA.json": _c("UG", "Commerce", "BBA", "1"),
    "Academic_Test_UG_Commerce_BCom.json": _c("UG", "Commerce", "BCom", "1"),
    "Academic_Test_UG_Commerce_BMS.json": _c("UG", "Commerce", "BMS", "1"),
    "Academic_Test_UG_Commerce_CA.json": _c("UG", "Commerce", "CA", "1"),
    "Academic_Test_UG_Science_BCA.json": _c("UG", "Science", "BCA", "1"),
    "Academic_Test_UG_Science_BCS.json": _c("UG", "Science", "BCS", "1"),
    "Academic_Test_UG_Science_BSc.json": _c("UG", "Science", "BSc", "1"),
    "Academic_Test_UG_Science_BTech.json": _c("UG", "Science", "BTech", "1"),
    "Academic_Test_UG_Science_MBBS.json": _c("UG", "Science", "MBBS", "1"),
    "Academic__Test_UG_Arts_BFA.json": _c("UG", "Arts", "BFA", "1"),

    # Psychometric (general for all)
    "Psychometric_Aptitude_Test.json": _c("general", "general", "Aptitude"),
    "Psychometric_Emotional_Quotient_Test.json": _c("general", "general", "EQ"),
    "Psychometric_Interest_Test.json": _c("general", "general", "Interest"),
    "Psychometric_Orientation_Style_Test.json": _c("general", "general", "Orientation"),
    "Psychometric_Personality_Test.json": _c("general", "general", "Personality"),
}

CATEGORY_MAPPING: Mapping[str, Category] = MappingProxyType(_TABLE)


def known_bank_files() -> List[str]:
    """Real filenames in the table (synthetic `_12` keys excluded)."""
    return [name for name in CATEGORY_MAPPING if name.endswith(".json")]


def resolve_categories(filename: str) -> List[Category]:
    """
    filename -> 0, 1 or 2 Category.
    - '11th12th' 포함: filename, filename + '_12' 두 키를 모두 조회 (없는 쪽은 건너뜀)
    - 그 외: 정확히 일치하는 키만
    Unmapped files give an empty list; never raises.
    """
    if COMBINED_MARKER in filename:
        keys = [filename, filename + SECOND_LEVEL_SUFFIX]
    else:
        keys = [filename]
    return [CATEGORY_MAPPING[k] for k in keys if k in CATEGORY_MAPPING]
