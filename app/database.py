from pathlib import Path
from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

# --- SQLAlchemy per-URL engine/session cache ---
_ENGINE_CACHE: Dict[str, Engine] = {}
_SESSION_CACHE: Dict[str, sessionmaker] = {}


def _ensure_sqlite_dir(url: str) -> None:
    """
    sqlite:///storage/x.db 형태면 상위 디렉토리를 미리 만들어 둔다.
    """
    prefix = "sqlite:///"
    if not url.startswith(prefix):
        return
    raw = url[len(prefix):]
    if not raw or raw == ":memory:":
        return
    Path(raw).parent.mkdir(parents=True, exist_ok=True)


def get_engine(url: str) -> Engine:
    eng = _ENGINE_CACHE.get(url)
    if eng is None:
        connect_args = {}
        if url.startswith("sqlite"):
            _ensure_sqlite_dir(url)
            connect_args = {"check_same_thread": False}
        eng = create_engine(url, connect_args=connect_args)
        _ENGINE_CACHE[url] = eng
    return eng


def get_session_local(url: str) -> sessionmaker:
    """
    Returns a sessionmaker bound to the engine for `url`, creating tables on first use.
    """
    sess = _SESSION_CACHE.get(url)
    if sess is None:
        eng = get_engine(url)
        init_db(eng)
        sess = sessionmaker(autocommit=False, autoflush=False, bind=eng)
        _SESSION_CACHE[url] = sess
    return sess


def init_db(engine: Engine) -> None:
    # models 모듈을 import 해야 Base.metadata 에 테이블이 등록됨
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
