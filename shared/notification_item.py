"""
Value type for a desktop notification waiting in the delivery queue.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class NotificationItem:
    """
    A single notification. Items carry no identity beyond their position in
    the queue, so equal items are delivered independently.
    """

    title: str
    body: str
    icon: Optional[str] = None

    def describe(self) -> str:
        """Short form used in log lines."""
        return self.title if len(self.title) <= 60 else self.title[:57] + "..."
