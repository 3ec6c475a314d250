"""
Repositories for the table store.

One repository per table. The shared CRUD lives in BaseRepository; each
subclass declares its columns and adds the queries the services need.
"""
import json
import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional

from veer.exceptions import RecordNotFoundError, ValidationError
from veer.storage.database import Database

logger = logging.getLogger(__name__)


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def to_utc_iso(value: datetime) -> str:
    """Normalise a datetime to the UTC ISO form stored in timestamp columns."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


class BaseRepository:
    """Generic CRUD over a single table."""

    table: str = ""
    columns: tuple = ()
    json_fields: tuple = ()
    bool_fields: tuple = ()
    datetime_fields: tuple = ()
    has_updated_at: bool = True
    order_by: str = "created_at DESC"

    def __init__(self, db: Database):
        self.db = db

    def _encode(self, data: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(data) - set(self.columns)
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for {self.table}: {', '.join(sorted(unknown))}",
                context={"table": self.table},
            )
        encoded = {}
        for key, value in data.items():
            if key in self.json_fields and value is not None:
                value = json.dumps(value)
            elif key in self.bool_fields and value is not None:
                value = 1 if value else 0
            elif key in self.datetime_fields and value is not None:
                value = self._normalize_timestamp(key, value)
            encoded[key] = value
        return encoded

    def _normalize_timestamp(self, key: str, value: Any) -> str:
        # Timestamp columns are compared as text, so they must all be UTC ISO
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                raise ValidationError(
                    f"Invalid timestamp for {self.table}.{key}: {value}",
                    field=key,
                )
        if not isinstance(value, datetime):
            raise ValidationError(f"Invalid timestamp for {self.table}.{key}: {value!r}", field=key)
        return to_utc_iso(value)

    def _decode(self, row) -> Dict[str, Any]:
        record = dict(row)
        for key in self.json_fields:
            raw = record.get(key)
            if raw is None:
                continue
            try:
                record[key] = json.loads(raw)
            except (TypeError, ValueError):
                logger.warning(f"Corrupt JSON in {self.table}.{key} for {record.get('id')}")
                record[key] = None
        for key in self.bool_fields:
            if key in record and record[key] is not None:
                record[key] = bool(record[key])
        return record

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a row.

        Args:
            data: Column values (id and timestamps are filled in)

        Returns:
            The stored record
        """
        now = utc_now()
        values = self._encode(data)
        values["id"] = str(uuid.uuid4())
        values["created_at"] = now
        if self.has_updated_at:
            values["updated_at"] = now
        names = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self.db.transaction() as cursor:
            self.db.execute(
                cursor,
                f"INSERT INTO {self.table} ({names}) VALUES ({placeholders})",
                tuple(values.values()),
            )
        logger.info(f"Created {self.table} row {values['id']}")
        return self.get(values["id"])

    def get(self, record_id: str) -> Dict[str, Any]:
        """Fetch a row by id; raises RecordNotFoundError when missing."""
        with self.db.transaction() as cursor:
            self.db.execute(cursor, f"SELECT * FROM {self.table} WHERE id = ?", (record_id,))
            row = cursor.fetchone()
        if row is None:
            raise RecordNotFoundError(self.table, record_id)
        return self._decode(row)

    def list(self, limit: Optional[int] = None, **filters: Any) -> List[Dict[str, Any]]:
        """List rows, optionally filtered by column equality."""
        query = f"SELECT * FROM {self.table}"
        params: list = []
        conditions = []
        for key, value in filters.items():
            if value is None:
                continue
            if key not in self.columns:
                raise ValidationError(f"Unknown filter for {self.table}: {key}")
            conditions.append(f"{key} = ?")
            params.append(value)
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += f" ORDER BY {self.order_by}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        with self.db.transaction() as cursor:
            self.db.execute(cursor, query, tuple(params))
            rows = cursor.fetchall()
        return [self._decode(row) for row in rows]

    def update(self, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update.

        Args:
            record_id: Row id
            changes: Columns to change; an empty dict only touches updated_at

        Returns:
            The updated record
        """
        values = self._encode(changes)
        if self.has_updated_at:
            values["updated_at"] = utc_now()
        if not values:
            return self.get(record_id)
        assignments = ", ".join(f"{key} = ?" for key in values)
        with self.db.transaction() as cursor:
            self.db.execute(
                cursor,
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                tuple(values.values()) + (record_id,),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(self.table, record_id)
        logger.info(f"Updated {self.table} row {record_id}")
        return self.get(record_id)

    def delete(self, record_id: str) -> None:
        with self.db.transaction() as cursor:
            self.db.execute(cursor, f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            if cursor.rowcount == 0:
                raise RecordNotFoundError(self.table, record_id)
        logger.info(f"Deleted {self.table} row {record_id}")


class SessionRepository(BaseRepository):
    table = "sessions"
    columns = ("mode", "title")
    order_by = "updated_at DESC"


class MessageRepository(BaseRepository):
    table = "messages"
    columns = ("session_id", "role", "content", "tool_used")
    has_updated_at = False
    order_by = "created_at ASC"

    def list_for_session(self, session_id: str) -> List[Dict[str, Any]]:
        """Messages of one chat session, oldest first."""
        return self.list(session_id=session_id)


class NoteRepository(BaseRepository):
    table = "notes"
    columns = ("title", "content", "tags")
    json_fields = ("tags",)
    order_by = "updated_at DESC"


class TaskRepository(BaseRepository):
    table = "tasks"
    columns = ("title", "description", "due_date", "completed", "priority")
    bool_fields = ("completed",)
    datetime_fields = ("due_date",)
    # Undated tasks sort last
    order_by = "due_date IS NULL, due_date ASC, created_at DESC"


class ProjectRepository(BaseRepository):
    table = "projects"
    columns = ("name", "description", "pinned", "session_ids")
    json_fields = ("session_ids",)
    bool_fields = ("pinned",)
    order_by = "pinned DESC, updated_at DESC"


class DailyDataRepository(BaseRepository):
    table = "daily_data"
    columns = ("data_type", "title", "content", "source", "source_url", "metadata", "fetched_at")
    json_fields = ("metadata",)
    datetime_fields = ("fetched_at",)
    order_by = "fetched_at DESC, created_at DESC"

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(data)
        if not data.get("fetched_at"):
            data["fetched_at"] = utc_now()
        return super().create(data)

    def list(self, limit: Optional[int] = None, data_type: Optional[str] = None, **filters: Any):
        return super().list(limit=limit, data_type=data_type, **filters)

    def exists_since(self, since: datetime) -> bool:
        """True when any row was fetched at or after ``since``."""
        with self.db.transaction() as cursor:
            self.db.execute(
                cursor,
                "SELECT 1 FROM daily_data WHERE fetched_at >= ? LIMIT 1",
                (to_utc_iso(since),),
            )
            return cursor.fetchone() is not None

    def delete_before(self, cutoff: datetime) -> int:
        """Delete rows fetched before ``cutoff``; returns the number removed."""
        with self.db.transaction() as cursor:
            self.db.execute(cursor, "DELETE FROM daily_data WHERE fetched_at < ?", (to_utc_iso(cutoff),))
            removed = cursor.rowcount
        if removed:
            logger.info(f"Removed {removed} stale daily_data rows")
        return removed

    def insert_many(self, items: Iterable[Dict[str, Any]], fetched_at: Optional[str] = None) -> int:
        """
        Insert several rows in one transaction with a shared fetched_at.

        Returns:
            Number of rows inserted
        """
        fetched_at = fetched_at or utc_now()
        now = utc_now()
        count = 0
        with self.db.transaction() as cursor:
            for item in items:
                values = self._encode({**item, "fetched_at": fetched_at})
                values["id"] = str(uuid.uuid4())
                values["created_at"] = now
                values["updated_at"] = now
                names = ", ".join(values)
                placeholders = ", ".join("?" for _ in values)
                self.db.execute(
                    cursor,
                    f"INSERT INTO daily_data ({names}) VALUES ({placeholders})",
                    tuple(values.values()),
                )
                count += 1
        logger.info(f"Inserted {count} daily_data rows")
        return count


class TableStore:
    """All repositories over one database, keyed by table name."""

    def __init__(self, db: Database):
        self.db = db
        self.sessions = SessionRepository(db)
        self.messages = MessageRepository(db)
        self.notes = NoteRepository(db)
        self.tasks = TaskRepository(db)
        self.projects = ProjectRepository(db)
        self.daily_data = DailyDataRepository(db)

    def repository(self, table: str) -> BaseRepository:
        repositories = {
            "sessions": self.sessions,
            "messages": self.messages,
            "notes": self.notes,
            "tasks": self.tasks,
            "projects": self.projects,
            "daily_data": self.daily_data,
        }
        if table not in repositories:
            raise ValidationError(f"Unknown table: {table}", field="table", value=table)
        return repositories[table]
