# repository.py
from __future__ import annotations

import json
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool
from sqlalchemy import text
from sqlmodel import SQLModel, Field, Session, create_engine

from domain import ContractConfig, ShiftEntry, ValidationError
from services import calculate_hours_worked, entry_fields, validate_config

logger = logging.getLogger(__name__)

ENTRIES_KEY = "workHoursEntries"
CONFIG_KEY = "workHoursConfig"


class KeyValueDB(SQLModel, table=True):
    __tablename__ = "kvstore"

    key: str = Field(primary_key=True)
    value: str


def build_engine(db_url: str, echo: bool = False):
    is_sqlite = db_url.startswith("sqlite")
    kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
        "connect_args": {},
    }
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # Serverless PG (Neon/Supabase): no local pool, bounded connect
        kwargs["poolclass"] = NullPool
        kwargs["connect_args"] = {"connect_timeout": 10}
        if "sslmode=" not in db_url:
            db_url += ("&" if "?" in db_url else "?") + "sslmode=require"
    return create_engine(db_url, **kwargs)


class SqlKeyValueStore:
    """String values under fixed string keys, stored in one SQL table."""
    def __init__(self, url: str = "sqlite:///workhours.db", echo: bool = False):
        self.url = url
        self.engine = build_engine(url, echo=echo)

        # Postgres: fail fast if the server is unreachable
        if not url.startswith("sqlite"):
            try:
                with self.engine.connect() as conn:
                    conn.execute(text("select 1"))
            except SQLAlchemyError as e:
                raise RuntimeError(f"No se pudo conectar a Postgres: {e}") from e

        SQLModel.metadata.create_all(self.engine)

    def get(self, key: str) -> str | None:
        with Session(self.engine) as session:
            row = session.get(KeyValueDB, key)
            return row.value if row is not None else None

    def set(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueDB, key)
            if row is None:
                row = KeyValueDB(key=key, value=value)
            else:
                row.value = value
            session.add(row)
            session.commit()


class WorkHoursRepository:
    """
    Loads and saves the shift entries and the contract configuration.

    Loading never fails: absent or unparseable records give the defaults.
    Saving reports failures through its return value instead of raising,
    so the caller keeps its in-memory state.
    """
    def __init__(self, store):
        self.store = store

    def _read_json(self, key: str):
        try:
            raw = self.store.get(key)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Could not read %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Stored %s is not valid JSON, using defaults", key)
            return None

    def _write_json(self, key: str, payload) -> bool:
        try:
            self.store.set(key, json.dumps(payload))
        except (SQLAlchemyError, OSError, TypeError, ValueError) as e:
            logger.error("Could not save %s: %s", key, e)
            return False
        return True

    def load_entries(self) -> List[ShiftEntry]:
        data = self._read_json(ENTRIES_KEY)
        if not isinstance(data, list):
            return []
        entries = []
        for item in data:
            try:
                day, start, end = entry_fields(item["date"], item["start"], item["end"])
                entries.append(ShiftEntry(
                    key=int(item["key"]),
                    date=day,
                    start=start,
                    end=end,
                    hours_worked=calculate_hours_worked(start, end),
                ))
            except (KeyError, TypeError, ValueError, ValidationError):
                logger.warning("Skipping malformed stored entry: %r", item)
        return entries

    def save_entries(self, entries: List[ShiftEntry]) -> bool:
        return self._write_json(ENTRIES_KEY, [e.to_dict() for e in entries])

    def load_config(self) -> ContractConfig:
        data = self._read_json(CONFIG_KEY)
        if not isinstance(data, dict):
            return ContractConfig()
        try:
            return validate_config(ContractConfig.from_dict(data))
        except (KeyError, ValidationError) as e:
            logger.warning("Stored contract configuration is invalid (%s), using defaults", e)
            return ContractConfig()

    def save_config(self, config: ContractConfig) -> bool:
        return self._write_json(CONFIG_KEY, config.to_dict())


__all__ = [
    "CONFIG_KEY",
    "ENTRIES_KEY",
    "KeyValueDB",
    "SqlKeyValueStore",
    "WorkHoursRepository",
    "build_engine",
]
