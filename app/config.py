import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# 프로젝트 루트 (app/config.py 기준으로 ..)
BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DATA_DIR = BASE_DIR / "data"
DEFAULT_DATABASE_URL = f"sqlite:///{(BASE_DIR / 'storage' / 'assessments.db').as_posix()}"

_TRUTHY = {"1", "true", "yes", "on"}


def _normalize_database_url(url: str) -> str:
    # Render/Heroku style URLs start with 'postgres://', SQLAlchemy wants 'postgresql://'
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Settings(BaseModel):
    """
    Upload run configuration.
    Built once at start (usually from the environment) and passed into the driver.
    """
    model_config = ConfigDict(frozen=True)

    data_dir: Path = DEFAULT_DATA_DIR
    exclude_substring: str = "package"
    batch_size: int = 50
    table: str = "assessments"
    database_url: str = DEFAULT_DATABASE_URL
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    request_timeout: Optional[float] = 30.0
    abort_on_clear_failure: bool = False
    cors_origins: Tuple[str, ...] = ()

    @property
    def uses_rest_store(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        .env (있으면) -> os.environ 순서로 읽어서 Settings 생성
        """
        load_dotenv()

        timeout_raw = os.getenv("ASSESSMENT_REQUEST_TIMEOUT", "30")
        timeout = float(timeout_raw) if timeout_raw.strip() else None

        return cls(
            data_dir=Path(os.getenv("ASSESSMENT_DATA_DIR", str(DEFAULT_DATA_DIR))),
            exclude_substring=os.getenv("ASSESSMENT_EXCLUDE", "package"),
            batch_size=int(os.getenv("ASSESSMENT_BATCH_SIZE", "50")),
            table=os.getenv("ASSESSMENT_TABLE", "assessments"),
            database_url=_normalize_database_url(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_SERVICE_KEY") or None,
            request_timeout=timeout,
            abort_on_clear_failure=os.getenv("ASSESSMENT_ABORT_ON_CLEAR_FAILURE", "").strip().lower() in _TRUTHY,
            cors_origins=tuple(
                o.strip() for o in os.getenv("ASSESSMENT_CORS_ORIGINS", "").split(",") if o.strip()
            ),
        )
