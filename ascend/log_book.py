# File: log_book.py
"""In-memory log store keyed by (habit_id, date).

Models the storage collaborator's upsert contract so the engines can be
exercised without a real database: writing a log replaces whatever record
existed for the same habit and day. Logs are snapshots, not events.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, datetime

from . import const
from .type_defs import HabitId, HabitLog, ISODate
from .utils.dt_utils import dt_date_key


class LogBook:
    """Insert-or-replace mapping of HabitLog records.

    Utilizes (habit_id, date) as the primary key. Iteration yields logs in
    ascending date order (habit id breaks ties) so the result can be handed
    to the streak and statistics engines directly.

    Concurrent writers to the same key are not arbitrated: the last upsert
    wins.
    """

    def __init__(self) -> None:
        """Initialize an empty log book."""
        self._logs: dict[tuple[HabitId, ISODate], HabitLog] = {}

    @classmethod
    def from_logs(cls, logs: Iterable[HabitLog]) -> LogBook:
        """Create a log book from existing records (later duplicates win)."""
        book = cls()
        for log in logs:
            book.upsert(log)
        return book

    def __len__(self) -> int:
        return len(self._logs)

    def __iter__(self) -> Iterator[HabitLog]:
        return iter(sorted(self._logs.values(), key=lambda log: (log.date, log.habit_id)))

    def __contains__(self, key: object) -> bool:
        return key in self._logs

    def upsert(self, log: HabitLog) -> HabitLog:
        """Insert or replace the record for the log's (habit_id, date).

        Returns:
            The stored log.
        """
        replaced = self._logs.get(log.key)
        self._logs[log.key] = log
        if replaced is not None:
            const.LOGGER.debug(
                "Replaced log for habit '%s' on %s (completed %s -> %s)",
                log.habit_id,
                log.date,
                replaced.completed,
                log.completed,
            )
        return log

    def get(self, habit_id: HabitId, day: str | date | datetime) -> HabitLog | None:
        """Return the log of one habit on one day, or None."""
        return self._logs.get((habit_id, dt_date_key(day)))

    def for_date(self, day: str | date | datetime) -> list[HabitLog]:
        """Return every log recorded for one day."""
        key = dt_date_key(day)
        return [log for log in self if log.date == key]

    def for_habit(self, habit_id: HabitId) -> list[HabitLog]:
        """Return the history of one habit, ascending by date."""
        return [log for log in self if log.habit_id == habit_id]

    def in_range(
        self,
        start: str | date | datetime,
        end: str | date | datetime,
    ) -> list[HabitLog]:
        """Return logs with start <= date <= end (inclusive), ascending."""
        start_key = dt_date_key(start)
        end_key = dt_date_key(end)
        return [log for log in self if start_key <= log.date <= end_key]

    def remove_habit(self, habit_id: HabitId) -> int:
        """Delete every log owned by a habit (habit deletion cascade).

        Returns:
            Number of records removed.
        """
        keys = [key for key in self._logs if key[0] == habit_id]
        for key in keys:
            del self._logs[key]
        return len(keys)

    def all(self) -> list[HabitLog]:
        """Return every log as a list, ascending by date."""
        return list(self)
