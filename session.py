# session.py
from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional

from domain import (
    ContractConfig,
    EditDraft,
    NotFoundError,
    ShiftEntry,
    Summary,
)
from services import calculate_hours_worked, entry_fields, summarize, validate_config

logger = logging.getLogger(__name__)


class EntryStore:
    """
    Ordered collection of shift entries.

    ``on_change`` receives the full list after every successful mutation and
    returns whether it was persisted. A failed save does not undo the change.
    """
    def __init__(self, entries: Iterable[ShiftEntry] = (),
                 on_change: Optional[Callable[[List[ShiftEntry]], bool]] = None):
        self._entries: List[ShiftEntry] = list(entries)
        self._on_change = on_change
        self._last_key = max((e.key for e in self._entries), default=0)
        self.last_save_ok = True

    def _next_key(self) -> int:
        key = max(int(time.time() * 1000), self._last_key + 1)
        self._last_key = key
        return key

    def _index_of(self, key) -> int:
        for i, e in enumerate(self._entries):
            if e.key == key:
                return i
        return -1

    def _changed(self) -> None:
        if self._on_change is None:
            return
        self.last_save_ok = bool(self._on_change(self.list()))
        if not self.last_save_ok:
            logger.warning("Entries changed in memory but could not be persisted")

    def add(self, date: str, start: str, end: str) -> int:
        date, start, end = entry_fields(date, start, end)
        entry = ShiftEntry(
            key=self._next_key(),
            date=date,
            start=start,
            end=end,
            hours_worked=calculate_hours_worked(start, end),
        )
        self._entries.append(entry)
        logger.debug("Added entry %s (%s %s-%s)", entry.key, date, start, end)
        self._changed()
        return entry.key

    def update(self, key, date: str, start: str, end: str) -> None:
        date, start, end = entry_fields(date, start, end)
        idx = self._index_of(key)
        if idx < 0:
            raise NotFoundError(key)
        entry = self._entries[idx]
        entry.date = date
        entry.start = start
        entry.end = end
        entry.hours_worked = calculate_hours_worked(start, end)
        logger.debug("Updated entry %s", key)
        self._changed()

    def remove(self, key) -> None:
        idx = self._index_of(key)
        if idx < 0:
            return
        del self._entries[idx]
        logger.debug("Removed entry %s", key)
        self._changed()

    def get(self, key) -> ShiftEntry:
        idx = self._index_of(key)
        if idx < 0:
            raise NotFoundError(key)
        return self._entries[idx]

    def list(self) -> List[ShiftEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class TrackerSession:
    """
    Everything one user works with: entries, contract configuration and the
    entry being edited, if any. Persistence goes through the repository given
    at construction.
    """
    def __init__(self, repository, entries: Iterable[ShiftEntry] = (),
                 config: ContractConfig | None = None):
        self.repository = repository
        self.store = EntryStore(entries, on_change=repository.save_entries)
        self._config = config if config is not None else ContractConfig()
        self._draft: EditDraft | None = None
        self.last_config_save_ok = True

    @classmethod
    def load(cls, repository) -> TrackerSession:
        entries = repository.load_entries()
        config = repository.load_config()
        logger.info("Loaded %d entries", len(entries))
        return cls(repository, entries=entries, config=config)

    @property
    def entries(self) -> List[ShiftEntry]:
        return self.store.list()

    @property
    def config(self) -> ContractConfig:
        return self._config

    @property
    def draft(self) -> EditDraft | None:
        return self._draft

    @property
    def persistence_ok(self) -> bool:
        return self.store.last_save_ok and self.last_config_save_ok

    def add_entry(self, date: str, start: str, end: str) -> int:
        return self.store.add(date, start, end)

    def remove_entry(self, key) -> None:
        self.store.remove(key)
        if self._draft is not None and self._draft.key == key:
            self.cancel_edit()

    # Edit draft: Idle -> Editing (begin_edit) -> Idle (commit_edit / cancel_edit)
    def begin_edit(self, key) -> EditDraft:
        entry = self.store.get(key)
        self._draft = EditDraft(key=entry.key, date=entry.date, start=entry.start, end=entry.end)
        return self._draft

    def commit_edit(self, date: str, start: str, end: str) -> None:
        if self._draft is None:
            raise NotFoundError(None)
        try:
            self.store.update(self._draft.key, date, start, end)
        except NotFoundError:
            self._draft = None
            raise
        self._draft = None

    def cancel_edit(self) -> None:
        self._draft = None

    def update_config(self, contract_hours_per_month, hourly_rate, extra_hourly_rate) -> ContractConfig:
        config = validate_config(ContractConfig(
            contract_hours_per_month=contract_hours_per_month,
            hourly_rate=hourly_rate,
            extra_hourly_rate=extra_hourly_rate,
        ))
        self._config = config
        self.last_config_save_ok = self.repository.save_config(config)
        if not self.last_config_save_ok:
            logger.warning("Contract configuration changed in memory but could not be persisted")
        return config

    def summary(self) -> Summary:
        return summarize(self.store.list(), self._config)
