"""
Notification Center - transient user-facing messages

Publishers:                      Subscribers:
├─ MutationController  ──────►   ├─ Console renderer
└─ EntityListController ─────►   └─ Tests / any UI shell

Messages are queued with a display duration and dropped once expired;
how they are drawn is up to the subscriber.
"""

from typing import Dict, Any, List, Optional, Callable
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from collections import deque
import itertools

from campuscore.core.config import settings
from campuscore.core.logging_config import logger


class Severity(str, Enum):
    """Notification severity levels"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    """A single queued message"""
    id: int
    severity: Severity
    message: str
    entity: Optional[str] = None
    duration_ms: int = 3000
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(milliseconds=self.duration_ms)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "message": self.message,
            "entity": self.entity,
            "duration_ms": self.duration_ms,
            "created_at": self.created_at.isoformat(),
        }


NotificationHandler = Callable[[Notification], None]


class NotificationCenter:
    """
    Queued, auto-dismissing message channel.

    Usage:
        center = NotificationCenter()
        center.subscribe(lambda n: print(n.severity, n.message))
        center.success("Student added successfully")
        center.active()   # messages not yet expired
    """

    def __init__(self, duration_ms: Optional[int] = None, max_queue: Optional[int] = None):
        self.duration_ms = duration_ms if duration_ms is not None else settings.NOTIFICATION_DURATION_MS
        self._queue: deque = deque(maxlen=max_queue or settings.NOTIFICATION_MAX_QUEUE)
        self._handlers: List[NotificationHandler] = []
        self._ids = itertools.count(1)
        self._history: List[Notification] = []

    def subscribe(self, handler: NotificationHandler) -> Callable[[], None]:
        """Register a handler; returns a function that removes it"""
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def notify(
        self,
        severity: Severity,
        message: str,
        entity: Optional[str] = None,
        duration_ms: Optional[int] = None
    ) -> Notification:
        notification = Notification(
            id=next(self._ids),
            severity=Severity(severity),
            message=message,
            entity=entity,
            duration_ms=duration_ms if duration_ms is not None else self.duration_ms,
        )
        self._queue.append(notification)
        self._history.append(notification)

        for handler in list(self._handlers):
            try:
                handler(notification)
            except Exception as e:
                logger.error(f"Notification handler error: {e}")

        return notification

    def info(self, message: str, entity: Optional[str] = None) -> Notification:
        return self.notify(Severity.INFO, message, entity)

    def success(self, message: str, entity: Optional[str] = None) -> Notification:
        return self.notify(Severity.SUCCESS, message, entity)

    def warning(self, message: str, entity: Optional[str] = None) -> Notification:
        return self.notify(Severity.WARNING, message, entity)

    def error(self, message: str, entity: Optional[str] = None) -> Notification:
        return self.notify(Severity.ERROR, message, entity)

    def dismiss(self, notification_id: int) -> bool:
        for notification in self._queue:
            if notification.id == notification_id:
                self._queue.remove(notification)
                return True
        return False

    def prune(self, now: Optional[datetime] = None) -> int:
        """Drop expired messages; returns how many were removed"""
        now = now or datetime.utcnow()
        expired = [n for n in self._queue if n.is_expired(now)]
        for notification in expired:
            self._queue.remove(notification)
        return len(expired)

    def active(self, now: Optional[datetime] = None) -> List[Notification]:
        self.prune(now)
        return list(self._queue)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def clear(self):
        self._queue.clear()
        self._history.clear()
