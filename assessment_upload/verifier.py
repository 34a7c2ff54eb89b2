import logging

from app.schemas import VerificationReport
from assessment_upload.categories import CLASS_LEVELS
from assessment_upload.store import AssessmentStore, StoreError

logger = logging.getLogger("assessment_upload")


def verify(store: AssessmentStore) -> VerificationReport:
    """
    업로드 후 검증 (read-only).
    - 전체 count 1회 + class_level 별 count 5회
    - level-stream-course 별 분포 (best effort)
    Query failures are logged and recorded; they never abort the report.
    """
    report = VerificationReport()
    logger.info("Upload verification:")

    try:
        report.total = store.count()
        logger.info(f"Total records in database: {report.total}")
    except StoreError as e:
        logger.error(f"Total count failed: {e}")
        report.errors.append(f"total: {e}")

    for level in CLASS_LEVELS:
        try:
            n = store.count(class_level=level)
        except StoreError as e:
            logger.error(f"Count for class {level} failed: {e}")
            report.by_level[level] = None
            report.errors.append(f"class {level}: {e}")
            continue
        report.by_level[level] = n
        logger.info(f"Class {level}: {n} questions")

    try:
        report.by_category = store.category_counts()
    except StoreError as e:
        logger.error(f"Category breakdown failed: {e}")
        report.errors.append(f"categories: {e}")
    else:
        for key, n in sorted(report.by_category.items()):
            logger.debug(f"  {key}: {n}")

    return report
