"""
Operator Event Log
==================

Bounded, newest-first feed of notable occurrences.

This module provides the EventLog class, the advisory stream consumed by
the textual log feed UI. Entries are agent-named, categorized and
icon-tagged.

Design Rules:
    - Fixed maximum size (drops oldest on overflow)
    - Append-only from the caller's perspective
    - Exposes minimal metrics for observability
    - Never read back by the engine's scoring or motion logic
"""

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List

from event_sentinel.models.output import LogEntry, LogType


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedEvent:
    """
    A notable occurrence produced inside a tick or by an operator command.

    Components return these instead of writing to the log directly, so a
    tick stays free of side effects until it completes.
    """

    type: LogType
    title: str
    description: str
    icon: str = "activity"


class EventLog:
    """
    Bounded operator log feed.

    Uses a drop-oldest policy once `capacity` entries are held.

    Attributes:
        capacity: Maximum number of retained entries
        dropped_count: Number of entries dropped due to overflow

    Example:
        log = EventLog(capacity=40)
        log.record(LogType.ALERT, "Alcohol Alert", "Sam K. - 4 drinks purchased", "beer")
        latest = log.entries()[0]
    """

    def __init__(self, capacity: int = 40) -> None:
        """
        Initialize the log.

        Args:
            capacity: Maximum entries to retain. Must be >= 1.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self._capacity = capacity
        self._entries: Deque[LogEntry] = deque()
        self._dropped_count: int = 0
        self._total_recorded: int = 0

    @property
    def capacity(self) -> int:
        """Maximum retained entries."""
        return self._capacity

    @property
    def size(self) -> int:
        """Current number of entries."""
        return len(self._entries)

    @property
    def dropped_count(self) -> int:
        """Number of entries dropped due to overflow."""
        return self._dropped_count

    @property
    def total_recorded(self) -> int:
        """Total entries ever recorded."""
        return self._total_recorded

    def record(
        self,
        type: LogType,
        title: str,
        description: str,
        icon: str = "activity",
        timestamp: float = 0.0,
    ) -> LogEntry:
        """
        Add an entry, dropping the oldest if full.

        Args:
            type: Entry category
            title: Short headline
            description: Detail line
            icon: Icon tag
            timestamp: Simulated seconds

        Returns:
            The recorded entry
        """
        entry = LogEntry(
            id=self._total_recorded,
            timestamp=timestamp,
            wall_time=time.strftime("%H:%M:%S"),
            type=type,
            title=title,
            description=description,
            icon=icon,
        )
        self._total_recorded += 1

        if len(self._entries) >= self._capacity:
            self._entries.pop()
            self._dropped_count += 1

        self._entries.appendleft(entry)
        logger.debug(f"Log [{type.value}] {title}: {description}")
        return entry

    def publish(self, events: Iterable[FeedEvent], timestamp: float = 0.0) -> int:
        """
        Record a batch of feed events in order.

        Returns:
            Number of events recorded.
        """
        count = 0
        for event in events:
            self.record(event.type, event.title, event.description, event.icon, timestamp)
            count += 1
        return count

    def entries(self) -> List[LogEntry]:
        """Entries, newest first."""
        return list(self._entries)

    def clear(self) -> int:
        """
        Remove all entries.

        Returns:
            Number of entries cleared.
        """
        cleared = len(self._entries)
        self._entries.clear()
        return cleared

    def metrics(self) -> dict:
        """
        Get log metrics for observability.

        Returns:
            Dict with size, capacity, dropped_count, total_recorded
        """
        return {
            "size": self.size,
            "capacity": self._capacity,
            "dropped_count": self._dropped_count,
            "total_recorded": self._total_recorded,
        }
