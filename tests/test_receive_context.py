"""Tests for ReceiveContext."""

from unittest.mock import Mock

from mq_adapter.pubsub.context import ReceiveContext


class TestReceiveContext:
    """Test ReceiveContext cancellation."""

    def test_starts_not_cancelled(self):
        ctx = ReceiveContext("projects/p/subscriptions/s")

        assert ctx.subscription_path == "projects/p/subscriptions/s"
        assert ctx.cancelled is False

    def test_cancel_cancels_attached_future(self):
        ctx = ReceiveContext("sub")
        future = Mock()
        ctx.attach(future)

        ctx.cancel()

        assert ctx.cancelled is True
        future.cancel.assert_called_once()

    def test_cancel_before_attach_cancels_on_attach(self):
        """A handler may cancel before the future has been bound."""
        ctx = ReceiveContext("sub")
        ctx.cancel()
        future = Mock()

        ctx.attach(future)

        future.cancel.assert_called_once()

    def test_cancel_is_idempotent(self):
        ctx = ReceiveContext("sub")
        future = Mock()
        ctx.attach(future)

        ctx.cancel()
        ctx.cancel()

        future.cancel.assert_called_once()
