"""
One-shot upload of local JSON question banks into the assessment store.

    clear store -> data/*.json -> resolve categories -> build rows -> batch insert -> verify

Run with `python -m assessment_upload.uploader` (no arguments; configuration comes
from the environment / .env, see app.config.Settings).
"""
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from app.config import Settings
from app.schemas import BatchOutcome, FileOutcome, FileStatus, RunStatus, RunSummary
from assessment_upload.categories import resolve_categories
from assessment_upload.loader import clear_store, load_rows
from assessment_upload.records import build_row
from assessment_upload.store import AssessmentStore, build_store
from assessment_upload.validator import check_row
from assessment_upload.verifier import verify


# -------------------------------------------------
# Logger 설정
# -------------------------------------------------
logger = logging.getLogger("assessment_upload")
if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(_h)
logger.setLevel(logging.INFO)

EXIT_CODES = {
    RunStatus.success: 0,
    RunStatus.failed: 1,
    RunStatus.partial: 2,
}


class BankFormatError(ValueError):
    """Raised when a bank file parses but has no usable `questions` array."""


class QuestionBank(NamedTuple):
    description: Optional[str]
    # (position in file, raw question)
    entries: List[Tuple[int, Dict[str, Any]]]


def discover_bank_files(data_dir: Path, exclude: str = "package") -> List[Path]:
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Question bank directory not found: {data_dir}")
    return sorted(
        p for p in data_dir.glob("*.json")
        if p.is_file() and not (exclude and exclude in p.name)
    )


def read_bank(path: Path) -> QuestionBank:
    """
    Load JSON with utf-8-sig to tolerate BOM
    """
    with path.open("r", encoding="utf-8-sig") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise BankFormatError(f"{path.name}: top level is not an object")
    questions = data.get("questions")
    if not isinstance(questions, list):
        raise BankFormatError(f"{path.name}: no questions array found")

    entries = []
    for index, q in enumerate(questions):
        if not isinstance(q, dict):
            logger.warning(f"{path.name}: item {index + 1} is not an object, skipping")
            continue
        entries.append((index, q))

    description = data.get("description")
    return QuestionBank(description if isinstance(description, str) else None, entries)


def upload_file(
    store: AssessmentStore, path: Path, settings: Settings
) -> Tuple[FileOutcome, List[BatchOutcome]]:
    filename = path.name
    categories = resolve_categories(filename)
    if not categories:
        logger.info(f"No mapping found for {filename}, skipping...")
        return FileOutcome(filename=filename, status=FileStatus.skipped, reason="no category mapping"), []

    try:
        bank = read_bank(path)
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and BankFormatError
        logger.error(f"Error processing file {filename}: {e}")
        return FileOutcome(filename=filename, status=FileStatus.failed, reason=str(e)), []

    outcome = FileOutcome(
        filename=filename,
        status=FileStatus.loaded,
        categories=[c.label for c in categories],
    )
    batches: List[BatchOutcome] = []

    for category in categories:
        rows = []
        for index, question in bank.entries:
            row = build_row(question, filename, index, category, bank.description)
            try:
                warnings = check_row(row)
            except ValueError as e:
                logger.error(f"[{filename}/{category.label}] invalid row skipped: {e}")
                outcome.failed_rows += 1
                continue
            for w in warnings:
                logger.warning(f"[{filename}/{category.label}] {w}")
            rows.append(row)

        for b in load_rows(store, rows, filename=filename, category=category, batch_size=settings.batch_size):
            batches.append(b)
            if b.ok:
                outcome.uploaded += b.size
            else:
                outcome.failed_rows += b.size

    return outcome, batches


def _final_status(summary: RunSummary) -> RunStatus:
    degraded = (
        (summary.clear is not None and not summary.clear.ok)
        or summary.failed_batches
        or summary.failed_files
        or any(f.failed_rows for f in summary.files)
        or (summary.verification is not None and summary.verification.errors)
    )
    if not degraded:
        return RunStatus.success
    if summary.total_uploaded == 0:
        return RunStatus.failed
    return RunStatus.partial


def run_upload(settings: Settings, store: AssessmentStore) -> RunSummary:
    summary = RunSummary()
    try:
        summary.clear = clear_store(store)
        if not summary.clear.ok:
            if settings.abort_on_clear_failure:
                logger.error("Clearing failed and abort_on_clear_failure is set; nothing uploaded")
                summary.status = RunStatus.failed
                summary.error = f"clear failed: {summary.clear.error}"
                return summary
            logger.warning("Continuing after failed clear; existing rows may be duplicated")

        for path in discover_bank_files(settings.data_dir, settings.exclude_substring):
            logger.info(f"Processing file: {path.name}")
            file_outcome, batches = upload_file(store, path, settings)
            summary.files.append(file_outcome)
            summary.batches.extend(batches)
            summary.total_uploaded += file_outcome.uploaded

        logger.info(f"Upload complete! Total questions uploaded: {summary.total_uploaded}")
        summary.verification = verify(store)
    except Exception as e:
        logger.exception(f"Error in comprehensive upload: {e}")
        summary.status = RunStatus.failed
        summary.error = str(e)
        return summary

    summary.status = _final_status(summary)
    return summary


def main() -> None:
    settings = Settings.from_env()
    store = build_store(settings)
    logger.info(
        f"Uploading banks from {settings.data_dir} "
        f"({'REST' if settings.uses_rest_store else 'SQL'} store, batch size {settings.batch_size})"
    )
    summary = run_upload(settings, store)
    logger.info(
        f"Run status: {summary.status.value} "
        f"(uploaded={summary.total_uploaded}, failed batches={len(summary.failed_batches)}, "
        f"failed files={len(summary.failed_files)})"
    )
    sys.exit(EXIT_CODES[summary.status])


if __name__ == "__main__":
    main()
