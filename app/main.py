import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from app import schemas
from app.config import Settings
from app.randomizer import randomize_for_user
from assessment_upload.categories import CLASS_LEVELS, resolve_categories
from assessment_upload.store import AssessmentStore, StoreError, build_store
from assessment_upload.uploader import run_upload
from assessment_upload.verifier import verify


# -------------------------------------------------
# Logger 설정
# -------------------------------------------------
logger = logging.getLogger("app")
if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(_h)
logger.setLevel(logging.INFO)


# -------------------------------------------------
# FastAPI 앱 / CORS
# -------------------------------------------------
def configure_cors(api: FastAPI, settings: Settings) -> None:
    """
    ASSESSMENT_CORS_ORIGINS (쉼표 구분) 에 지정된 origin 만 허용. 비어 있으면 CORS 미적용
    """
    if not settings.cors_origins:
        return
    api.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )


app = FastAPI()
configure_cors(app, Settings.from_env())


# -------------------------------------------------
# Dependencies
# -------------------------------------------------
def get_settings() -> Settings:
    return Settings.from_env()


def get_store(settings: Settings = Depends(get_settings)) -> AssessmentStore:
    return build_store(settings)


def _store_failure(e: StoreError) -> HTTPException:
    logger.error(f"store error: {e}")
    return HTTPException(status_code=502, detail=f"Assessment store error: {e}")


# -------------------------------------------------
# API 라우팅
# -------------------------------------------------
@app.get("/api/levels", response_model=schemas.ClassLevels)
def list_levels():
    return schemas.ClassLevels(levels=list(CLASS_LEVELS))


@app.get("/api/categories/{filename}", response_model=List[schemas.Category])
def read_categories(filename: str):
    """
    파일명 -> 매핑된 Category 목록 (11th12th 파일은 2개)
    """
    categories = resolve_categories(filename)
    if not categories:
        raise HTTPException(status_code=404, detail=f"No category mapping for '{filename}'")
    return categories


@app.get("/api/assessments", response_model=List[schemas.AssessmentOut])
def read_assessments(
    class_level: Optional[str] = None,
    stream: Optional[str] = None,
    course: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    user: Optional[str] = None,
    test_id: str = "default",
    store: AssessmentStore = Depends(get_store),
):
    """
    Stored questions, optionally filtered.
    With `user`, question and option order is shuffled deterministically per (user, test_id).
    """
    try:
        if user:
            rows = store.fetch(class_level=class_level, stream=stream, course=course)
            return randomize_for_user(rows, user, test_id, max_questions=limit)
        return store.fetch(class_level=class_level, stream=stream, course=course, limit=limit)
    except StoreError as e:
        raise _store_failure(e)


@app.get("/api/verify", response_model=schemas.VerificationReport)
def read_verification(store: AssessmentStore = Depends(get_store)):
    return verify(store)


@app.post("/api/upload", response_model=schemas.RunSummary)
def trigger_upload(
    settings: Settings = Depends(get_settings),
    store: AssessmentStore = Depends(get_store),
):
    """
    Full reload: clear -> upload every bank file -> verify.
    Partial failures are reported in the summary, not as HTTP errors.
    """
    summary = run_upload(settings, store)
    logger.info(f"[upload] status={summary.status.value} uploaded={summary.total_uploaded}")
    return summary


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="127.0.0.1", port=8000)
