"""
Unit Tests for Notification Center
Tests for: subscribers, expiry, dismissal, queue bounds
"""
import pytest
from datetime import timedelta

from campuscore.modules.reconciliation.notifications import (
    Notification,
    NotificationCenter,
    Severity,
)


class TestPublishing:
    """Test message delivery"""

    def test_subscriber_receives_messages(self, notifications):
        received = []
        notifications.subscribe(received.append)

        notifications.success("Student added successfully", "students")

        assert len(received) == 1
        assert received[0].severity == Severity.SUCCESS
        assert received[0].entity == "students"

    def test_unsubscribe(self, notifications):
        received = []
        unsubscribe = notifications.subscribe(received.append)

        unsubscribe()
        notifications.info("hello")

        assert received == []

    def test_failing_handler_does_not_stop_others(self, notifications):
        """Test one broken subscriber does not hide the message from the rest"""
        received = []

        def broken(notification):
            raise RuntimeError("render failed")

        notifications.subscribe(broken)
        notifications.subscribe(received.append)

        notifications.error("Failed to load students")

        assert [n.message for n in received] == ["Failed to load students"]

    def test_severity_helpers(self, notifications):
        notifications.info("a")
        notifications.success("b")
        notifications.warning("c")
        notifications.error("d")

        assert [n.severity for n in notifications.history] == [
            Severity.INFO, Severity.SUCCESS, Severity.WARNING, Severity.ERROR,
        ]
        assert notifications.last.message == "d"

    def test_ids_increase(self, notifications):
        first = notifications.info("a")
        second = notifications.info("b")

        assert second.id > first.id


class TestExpiry:
    """Test auto-dismissal"""

    def test_messages_expire_after_duration(self):
        """Test a message is active until its duration passes"""
        center = NotificationCenter(duration_ms=3000)
        notification = center.success("Course added successfully")

        assert center.active(notification.created_at + timedelta(milliseconds=2999)) == [notification]
        assert center.active(notification.created_at + timedelta(milliseconds=3000)) == []
        assert center.history == [notification]

    def test_prune_counts_removed(self):
        center = NotificationCenter(duration_ms=1000)
        n = center.info("a")
        center.info("b")

        assert center.prune(n.created_at + timedelta(seconds=5)) == 2

    def test_dismiss(self, notifications):
        n = notifications.warning("Student added but details not returned")

        assert notifications.dismiss(n.id)
        assert notifications.dismiss(n.id) is False
        assert notifications.active() == []

    def test_queue_is_bounded(self):
        """Test the oldest messages drop when the queue is full"""
        center = NotificationCenter(duration_ms=60000, max_queue=2)
        for i in range(3):
            center.info(f"m{i}")

        assert [n.message for n in center.active()] == ["m1", "m2"]
        assert len(center.history) == 3

    def test_clear(self, notifications):
        notifications.info("a")

        notifications.clear()

        assert notifications.history == []
        assert notifications.last is None


class TestNotification:
    """Test the message record"""

    def test_to_dict(self):
        n = Notification(id=1, severity=Severity.ERROR, message="boom", entity="courses", duration_ms=500)

        data = n.to_dict()

        assert data["severity"] == "error"
        assert data["entity"] == "courses"
        assert data["duration_ms"] == 500

    def test_is_expired(self):
        n = Notification(id=1, severity=Severity.INFO, message="x", duration_ms=10)

        assert not n.is_expired(n.created_at)
        assert n.is_expired(n.created_at + timedelta(milliseconds=10))
