"""
Database Handler Module.

This module provides SQLite storage for extracted job drafts. It sits at
the persistence boundary: it takes a finished draft plus metadata
(status, creation time) and returns an identifier.

Features:
    - Automatic schema creation
    - Status updates as the job moves through the workshop
    - Query helpers

Author: Workshop Tools Team
"""

import sqlite3
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import get_config
from src.utils.logger import get_logger
from src.utils.helpers import ensure_directory
from src.utils.exceptions import DatabaseError
from src.extraction.job_draft import ExtractedJobDraft

logger = get_logger(__name__)


class JobStatus(str, Enum):
    """Workshop status of a job."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class JobStore:
    """
    Handles database operations for job drafts.

    Attributes:
        db_path: Path to the SQLite database file
        table_name: Name of the jobs table

    Example:
        >>> store = JobStore()
        >>> job_id = store.save(outcome.draft)
        >>> store.update_status(job_id, JobStatus.IN_PROGRESS)
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        """
        Initialize the job store.

        Args:
            db_path: Path to database file. If None, uses configuration.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            output_dir = Path(get_config("paths.output_dir", "outputs"))
            db_name = get_config("output.database.name", "jobs.db")
            self.db_path = output_dir / db_name

        self.table_name = get_config("output.database.table_name", "jobs")

        ensure_directory(self.db_path.parent)
        self._create_tables()

        logger.info(f"JobStore initialized (db: {self.db_path})")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _create_tables(self) -> None:
        """Create the required database tables."""
        create_sql = f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            id TEXT PRIMARY KEY,
            customer_name TEXT NOT NULL,
            customer_phone TEXT NOT NULL,
            bike_model TEXT NOT NULL,
            work_required TEXT NOT NULL,
            work_done TEXT NOT NULL,
            labor_cost TEXT NOT NULL,
            parts_cost TEXT NOT NULL,
            total_cost TEXT NOT NULL,
            notes TEXT NOT NULL,
            date_in TEXT NOT NULL,
            status TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """

        try:
            conn = self._connect()
            try:
                conn.execute(create_sql)
                conn.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_{self.table_name}_status
                    ON {self.table_name} (status)
                """)
                conn.commit()
            finally:
                conn.close()

            logger.debug("Database tables created/verified")

        except sqlite3.Error as e:
            raise DatabaseError("create tables", str(e))

    def save(
        self,
        draft: ExtractedJobDraft,
        status: JobStatus = JobStatus.PENDING,
        created_at: Optional[datetime] = None
    ) -> str:
        """
        Persist a job draft.

        Costs are stored as decimal strings so they read back exactly.

        Args:
            draft: Draft to store.
            status: Initial workshop status.
            created_at: Creation time. Defaults to now.

        Returns:
            Identifier of the new record.

        Raises:
            DatabaseError: If insertion fails.
        """
        job_id = uuid.uuid4().hex
        timestamp = (created_at or datetime.now()).isoformat()

        insert_sql = f"""
        INSERT INTO {self.table_name} (
            id, customer_name, customer_phone, bike_model, work_required,
            work_done, labor_cost, parts_cost, total_cost, notes, date_in,
            status, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """

        values = (
            job_id,
            draft.customer_name,
            draft.customer_phone,
            draft.bike_model,
            draft.work_required,
            draft.work_done,
            str(draft.labor_cost),
            str(draft.parts_cost),
            str(draft.total_cost),
            draft.notes,
            draft.date_in,
            JobStatus(status).value,
            timestamp,
            timestamp,
        )

        try:
            conn = self._connect()
            try:
                conn.execute(insert_sql, values)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("insert", str(e))

        logger.info(f"Saved job {job_id} for {draft.customer_name}")
        return job_id

    def get(self, job_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a record by identifier.

        Returns:
            Record dictionary or None if not found.
        """
        query = f"SELECT * FROM {self.table_name} WHERE id = ?"

        try:
            conn = self._connect()
            try:
                row = conn.execute(query, (job_id,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("get", str(e))

        return dict(row) if row else None

    def get_all(
        self,
        limit: Optional[int] = None,
        status: Optional[JobStatus] = None
    ) -> List[Dict[str, Any]]:
        """
        Retrieve records, newest first.

        Args:
            limit: Maximum number of records to retrieve.
            status: Only return jobs with this status.

        Returns:
            List of record dictionaries.
        """
        query = f"SELECT * FROM {self.table_name}"
        params: List[Any] = []

        if status is not None:
            query += " WHERE status = ?"
            params.append(JobStatus(status).value)

        query += " ORDER BY created_at DESC, rowid DESC"
        if limit:
            query += " LIMIT ?"
            params.append(int(limit))

        try:
            conn = self._connect()
            try:
                rows = conn.execute(query, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("get_all", str(e))

        return [dict(row) for row in rows]

    def update_status(self, job_id: str, status: JobStatus) -> bool:
        """
        Move a job to a new workshop status.

        Returns:
            True if a record was updated, False if the id is unknown.
        """
        query = f"""
        UPDATE {self.table_name}
        SET status = ?, updated_at = ?
        WHERE id = ?
        """

        try:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    query,
                    (JobStatus(status).value, datetime.now().isoformat(), job_id)
                )
                conn.commit()
                updated = cursor.rowcount > 0
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("update_status", str(e))

        if updated:
            logger.debug(f"Job {job_id} -> {JobStatus(status).value}")
        return updated

    def get_count(self) -> int:
        """Get total number of records."""
        try:
            conn = self._connect()
            try:
                count = conn.execute(f"SELECT COUNT(*) FROM {self.table_name}").fetchone()[0]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("get_count", str(e))

        return count
