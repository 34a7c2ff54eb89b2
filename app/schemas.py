from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

OptionsMap = Dict[str, Any]


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    class_level: str  # '10', '11', '12', 'UG', 'general'
    stream: Optional[str] = None
    course: Optional[str] = None
    year: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.class_level}-{self.stream}"

    @property
    def summary_key(self) -> str:
        key = f"{self.class_level}-{self.stream}"
        if self.course:
            key += f"-{self.course}"
        return key


class AssessmentRow(BaseModel):
    """One store-ready question row."""
    class_level: str
    stream: Optional[str] = None
    course: Optional[str] = None
    year: Optional[str] = None
    question_id: str
    question_text: str
    question_type: str = "mcq"
    options: OptionsMap = Field(default_factory=dict)
    correct_answer: str = "a"
    subject: str = "General"
    difficulty: str = "medium"
    explanation: str = ""
    created_at: str


class AssessmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: str
    class_level: str
    stream: Optional[str] = None
    course: Optional[str] = None
    year: Optional[str] = None
    question_text: str
    question_type: str
    options: Optional[OptionsMap] = None
    correct_answer: str
    subject: Optional[str] = None
    difficulty: Optional[str] = None
    explanation: Optional[str] = None


# --- Upload outcomes ---
class RunStatus(str, Enum):
    success = "success"
    partial = "partial"
    failed = "failed"


class FileStatus(str, Enum):
    loaded = "loaded"
    skipped = "skipped"
    failed = "failed"


class ClearOutcome(BaseModel):
    ok: bool
    error: Optional[str] = None


class BatchOutcome(BaseModel):
    filename: str
    category: str
    batch_index: int  # 1-based
    size: int
    ok: bool
    error: Optional[str] = None


class FileOutcome(BaseModel):
    filename: str
    status: FileStatus
    categories: List[str] = Field(default_factory=list)
    uploaded: int = 0
    failed_rows: int = 0
    reason: Optional[str] = None


class VerificationReport(BaseModel):
    total: Optional[int] = None
    by_level: Dict[str, Optional[int]] = Field(default_factory=dict)
    by_category: Dict[str, int] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)


class RunSummary(BaseModel):
    status: RunStatus = RunStatus.success
    clear: Optional[ClearOutcome] = None
    total_uploaded: int = 0
    files: List[FileOutcome] = Field(default_factory=list)
    batches: List[BatchOutcome] = Field(default_factory=list)
    verification: Optional[VerificationReport] = None
    error: Optional[str] = None

    @property
    def failed_batches(self) -> List[BatchOutcome]:
        return [b for b in self.batches if not b.ok]

    @property
    def failed_files(self) -> List[FileOutcome]:
        return [f for f in self.files if f.status == FileStatus.failed]


class ClassLevels(BaseModel):
    levels: List[str]
