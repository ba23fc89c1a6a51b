from __future__ import annotations

import json
import logging
import os
import secrets
import sqlite3
import threading
from datetime import datetime
from typing import Any

from app.schemas.submission import AnalysisType, SubmissionRecord

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "created_at",
    "updated_at",
    "analysis_type",
    "file_name",
    "file_type",
    "file_size",
    "resume_text",
    "resume_text_length",
    "job_description_text",
    "analyzer_results_json",
    "matcher_results_json",
    "ip_address",
    "user_agent",
)


def _dump_json(value: dict[str, Any] | None) -> str | None:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def _load_json(value: str | None) -> dict[str, Any] | None:
    return json.loads(value) if value else None


class SubmissionStore:
    """SQLite-backed collection of submission records."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS submissions (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    analysis_type TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    file_type TEXT NOT NULL,
                    file_size INTEGER NOT NULL,
                    resume_text TEXT NOT NULL,
                    resume_text_length INTEGER NOT NULL,
                    job_description_text TEXT,
                    analyzer_results_json TEXT,
                    matcher_results_json TEXT,
                    ip_address TEXT NOT NULL,
                    user_agent TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_submissions_type_created
                ON submissions (analysis_type, created_at DESC);
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_submissions_created
                ON submissions (created_at DESC);
                """
            )
            self._conn = conn
            return conn

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def ping(self) -> bool:
        try:
            conn = self._get_connection()
            with self._conn_lock:
                conn.execute("SELECT 1").fetchone()
            return True
        except (sqlite3.Error, OSError) as exc:
            logger.warning("submission_store_ping_failed: %s", exc)
            return False

    def create(self, record: SubmissionRecord) -> str:
        conn = self._get_connection()
        record_id = secrets.token_hex(12)
        row = (
            record_id,
            record.created_at.isoformat(),
            record.updated_at.isoformat(),
            record.analysis_type,
            record.file_name,
            record.file_type,
            record.file_size,
            record.resume_text,
            record.resume_text_length,
            record.job_description_text,
            _dump_json(record.analyzer_results),
            _dump_json(record.matcher_results),
            record.ip_address,
            record.user_agent,
        )
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._conn_lock:
            conn.execute(
                f"INSERT INTO submissions ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                row,
            )
        return record_id

    def get(self, record_id: str) -> SubmissionRecord | None:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM submissions WHERE id = ?",
                (record_id,),
            )
            row = cur.fetchone()
        return self._row_to_record(row) if row else None

    def find(
        self,
        analysis_type: AnalysisType | None = None,
        limit: int = 20,
        skip: int = 0,
    ) -> list[SubmissionRecord]:
        conn = self._get_connection()
        query = f"SELECT {', '.join(_COLUMNS)} FROM submissions"
        params: list[Any] = []
        if analysis_type:
            query += " WHERE analysis_type = ?"
            params.append(analysis_type)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?"
        params.extend([max(0, int(limit)), max(0, int(skip))])
        with self._conn_lock:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_record(row) for row in rows]

    def count(self, analysis_type: AnalysisType | None = None) -> int:
        conn = self._get_connection()
        with self._conn_lock:
            if analysis_type:
                cur = conn.execute(
                    "SELECT COUNT(1) FROM submissions WHERE analysis_type = ?",
                    (analysis_type,),
                )
            else:
                cur = conn.execute("SELECT COUNT(1) FROM submissions")
            return int(cur.fetchone()[0] or 0)

    def delete(self, record_id: str) -> bool:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute("DELETE FROM submissions WHERE id = ?", (record_id,))
        return (cur.rowcount or 0) > 0

    @staticmethod
    def _row_to_record(row: tuple) -> SubmissionRecord:
        data = dict(zip(_COLUMNS, row))
        return SubmissionRecord(
            id=data["id"],
            file_name=data["file_name"],
            file_type=data["file_type"],
            file_size=data["file_size"],
            analysis_type=data["analysis_type"],
            resume_text=data["resume_text"],
            resume_text_length=data["resume_text_length"],
            job_description_text=data["job_description_text"],
            analyzer_results=_load_json(data["analyzer_results_json"]),
            matcher_results=_load_json(data["matcher_results_json"]),
            ip_address=data["ip_address"],
            user_agent=data["user_agent"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
