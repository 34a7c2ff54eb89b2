"""
Assessment store backends.

Both backends expose the same small surface used by the uploader and the API:
delete_all / insert / count / category_counts / fetch.
Every backend failure is raised as StoreError.
"""
from collections import Counter
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import requests
from sqlalchemy import func, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.config import Settings
from app.database import get_session_local
from app.models import Assessment
from app.schemas import AssessmentOut, AssessmentRow, Category

RowLike = Union[AssessmentRow, Dict[str, Any]]

PAGE_SIZE = 1000


class StoreError(RuntimeError):
    """Raised when the assessment store rejects or fails an operation."""


def _as_dict(row: RowLike) -> Dict[str, Any]:
    if isinstance(row, AssessmentRow):
        return row.model_dump()
    return dict(row)


def _summary_key(class_level, stream, course) -> str:
    return Category(class_level=str(class_level), stream=stream, course=course).summary_key


class AssessmentStore:
    def delete_all(self) -> None:
        raise NotImplementedError

    def insert(self, rows: Sequence[RowLike]) -> None:
        raise NotImplementedError

    def count(self, class_level: Optional[str] = None) -> int:
        raise NotImplementedError

    def category_counts(self) -> Dict[str, int]:
        raise NotImplementedError

    def fetch(
        self,
        class_level: Optional[str] = None,
        stream: Optional[str] = None,
        course: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError


# -------------------------------------------------
# SQLAlchemy backend
# -------------------------------------------------
class SqlAssessmentStore(AssessmentStore):
    def __init__(self, session_local: sessionmaker):
        self.session_local = session_local

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.session_local()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(str(e)) from e
        finally:
            db.close()

    def delete_all(self) -> None:
        with self._session() as db:
            db.query(Assessment).delete(synchronize_session=False)

    def insert(self, rows: Sequence[RowLike]) -> None:
        if not rows:
            return
        with self._session() as db:
            db.execute(insert(Assessment), [_as_dict(r) for r in rows])

    def count(self, class_level: Optional[str] = None) -> int:
        with self._session() as db:
            q = db.query(func.count(Assessment.id))
            if class_level is not None:
                q = q.filter(Assessment.class_level == class_level)
            return int(q.scalar() or 0)

    def category_counts(self) -> Dict[str, int]:
        with self._session() as db:
            rows = (
                db.query(Assessment.class_level, Assessment.stream, Assessment.course, func.count(Assessment.id))
                .group_by(Assessment.class_level, Assessment.stream, Assessment.course)
                .all()
            )
        counts: Dict[str, int] = {}
        for class_level, stream, course, n in rows:
            key = _summary_key(class_level, stream, course)
            counts[key] = counts.get(key, 0) + int(n)
        return counts

    def fetch(self, class_level=None, stream=None, course=None, limit=None) -> List[Dict[str, Any]]:
        with self._session() as db:
            q = db.query(Assessment)
            if class_level is not None:
                q = q.filter(Assessment.class_level == class_level)
            if stream is not None:
                q = q.filter(Assessment.stream == stream)
            if course is not None:
                q = q.filter(Assessment.course == course)
            q = q.order_by(Assessment.id)
            if limit:
                q = q.limit(limit)
            return [AssessmentOut.model_validate(r).model_dump() for r in q.all()]


# -------------------------------------------------
# Hosted PostgREST (Supabase) backend
# -------------------------------------------------
class RestAssessmentStore(AssessmentStore):
    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "assessments",
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.table = table
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, params=None, json=None, extra_headers=None) -> requests.Response:
        headers = dict(self.headers)
        if extra_headers:
            headers.update(extra_headers)
        try:
            resp = self.session.request(
                method, self.endpoint, params=params, json=json, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise StoreError(f"{method} {self.table} failed: {e}") from e
        if resp.status_code >= 400:
            raise StoreError(f"{method} {self.table} -> HTTP {resp.status_code}: {resp.text[:200]}")
        return resp

    @staticmethod
    def _eq_filters(**filters) -> Dict[str, str]:
        return {k: f"eq.{v}" for k, v in filters.items() if v is not None}

    def delete_all(self) -> None:
        # always-true filter, PostgREST refuses unfiltered deletes
        self._request("DELETE", params={"id": "neq.0"})

    def insert(self, rows: Sequence[RowLike]) -> None:
        if not rows:
            return
        self._request("POST", json=[_as_dict(r) for r in rows], extra_headers={"Prefer": "return=minimal"})

    def count(self, class_level: Optional[str] = None) -> int:
        params = {"select": "*"}
        params.update(self._eq_filters(class_level=class_level))
        resp = self._request("HEAD", params=params, extra_headers={"Prefer": "count=exact"})
        content_range = resp.headers.get("Content-Range", "")
        # "0-24/120" or "*/0"
        total = content_range.rpartition("/")[2]
        if not total.isdigit():
            raise StoreError(f"count on {self.table}: unexpected Content-Range {content_range!r}")
        return int(total)

    def _json(self, resp: requests.Response) -> List[Dict[str, Any]]:
        # gateways can answer 2xx with an HTML page
        try:
            body = resp.json()
        except ValueError as e:
            raise StoreError(f"GET {self.table}: response is not JSON: {resp.text[:200]}") from e
        if not isinstance(body, list):
            raise StoreError(f"GET {self.table}: expected a JSON array, got {type(body).__name__}")
        return body

    def _paged(self, params: Dict[str, Any], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = PAGE_SIZE if limit is None else min(PAGE_SIZE, limit - len(out))
            if page <= 0:
                break
            chunk = self._json(self._request("GET", params={**params, "limit": page, "offset": offset}))
            out.extend(chunk)
            if len(chunk) < page:
                break
            offset += len(chunk)
        return out

    def category_counts(self) -> Dict[str, int]:
        rows = self._paged({"select": "class_level,stream,course", "order": "id.asc"})
        counter = Counter(_summary_key(r["class_level"], r.get("stream"), r.get("course")) for r in rows)
        return dict(counter)

    def fetch(self, class_level=None, stream=None, course=None, limit=None) -> List[Dict[str, Any]]:
        params = {"select": "*", "order": "id.asc"}
        params.update(self._eq_filters(class_level=class_level, stream=stream, course=course))
        rows = self._paged(params, limit=limit)
        return [AssessmentOut.model_validate(r).model_dump() for r in rows]


def build_store(settings: Settings) -> AssessmentStore:
    """REST store when Supabase credentials are configured, SQL store otherwise."""
    if settings.uses_rest_store:
        return RestAssessmentStore(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.table,
            timeout=settings.request_timeout,
        )
    return SqlAssessmentStore(get_session_local(settings.database_url))
