import logging
from typing import Iterator, List, Sequence, TypeVar

from app.schemas import AssessmentRow, BatchOutcome, Category, ClearOutcome
from assessment_upload.store import AssessmentStore, StoreError

logger = logging.getLogger("assessment_upload")

DEFAULT_BATCH_SIZE = 50

T = TypeVar("T")


def iter_batches(rows: Sequence[T], size: int = DEFAULT_BATCH_SIZE) -> Iterator[List[T]]:
    """Consecutive chunks of `size`; the last one may be shorter."""
    if size <= 0:
        raise ValueError(f"batch size must be positive, got {size}")
    for start in range(0, len(rows), size):
        yield list(rows[start:start + size])


def clear_store(store: AssessmentStore) -> ClearOutcome:
    logger.info("Clearing existing assessments data...")
    try:
        store.delete_all()
    except StoreError as e:
        logger.error(f"Error clearing data: {e}")
        return ClearOutcome(ok=False, error=str(e))
    logger.info("Existing data cleared successfully")
    return ClearOutcome(ok=True)


def load_rows(
    store: AssessmentStore,
    rows: Sequence[AssessmentRow],
    *,
    filename: str,
    category: Category,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> List[BatchOutcome]:
    """
    rows -> batch 단위 insert (순차). 실패한 batch 는 재시도 없이 기록만 하고 다음 batch 로 진행.
    """
    outcomes: List[BatchOutcome] = []
    for batch_index, batch in enumerate(iter_batches(rows, batch_size), start=1):
        try:
            store.insert(batch)
        except StoreError as e:
            logger.error(
                f"Error uploading batch {batch_index} for {filename} ({category.label}): {e}"
            )
            outcomes.append(BatchOutcome(
                filename=filename,
                category=category.label,
                batch_index=batch_index,
                size=len(batch),
                ok=False,
                error=str(e),
            ))
            continue

        logger.info(
            f"Uploaded batch {batch_index} for {filename} ({category.label}): {len(batch)} questions"
        )
        outcomes.append(BatchOutcome(
            filename=filename,
            category=category.label,
            batch_index=batch_index,
            size=len(batch),
            ok=True,
        ))
    return outcomes
