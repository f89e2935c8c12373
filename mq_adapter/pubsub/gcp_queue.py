"""
Google Cloud Pub/Sub message queue: publish bytes to a topic, receive from a subscription.
"""

import queue
import time
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Iterator, Optional, Union

from google.cloud import pubsub_v1

from mq_adapter.config import GCPConfig
from mq_adapter.errors import PublishError, ReceiveError
from mq_adapter.logging import log_error, log_info, log_warning
from mq_adapter.pubsub.clients import GCPClientFactory, PubSubClientFactory
from mq_adapter.pubsub.context import ReceiveContext
from mq_adapter.pubsub.resources import (
    resolve_or_create_subscription,
    resolve_or_create_topic,
)

MessageHandler = Callable[[ReceiveContext, Any], None]

# How often blocked loops re-check cancellation and stream state
_POLL_INTERVAL_SECONDS = 0.5


class GCPQueue:
    """Publishes to and subscribes from one Pub/Sub topic/subscription pair.

    A new client is created for every call and closed when the call ends.
    """

    def __init__(
        self,
        config: Optional[GCPConfig] = None,
        client_factory: Optional[PubSubClientFactory] = None,
    ):
        """
        Initialize the queue.

        Args:
            config: Pub/Sub settings. If None, read from the environment.
            client_factory: Builds Pub/Sub clients. Defaults to GCPClientFactory.
        """
        log_info("Create GCP PubSub message queue config.")
        self.config = config if config is not None else GCPConfig.from_env()
        self._client_factory = client_factory or GCPClientFactory()

    @classmethod
    def from_env(cls, client_factory: Optional[PubSubClientFactory] = None) -> "GCPQueue":
        return cls(GCPConfig.from_env(), client_factory=client_factory)

    def publish(self, payload: Union[bytes, bytearray]) -> str:
        """
        Publish a message on the configured topic.

        Config needed: project_id, topic_name, create_topic

        Args:
            payload: Message body

        Returns:
            Message ID assigned by Pub/Sub

        Raises:
            ClientInitError: Publisher client could not be created
            TopicUnavailable: Topic missing and create_topic is False
            CreateError: Topic creation was rejected
            PublishError: Publishing failed
        """
        if not isinstance(payload, (bytes, bytearray)):
            raise TypeError(
                f"payload must be bytes, got {type(payload).__name__}"
            )

        publisher = self._client_factory.publisher()
        try:
            topic_path = resolve_or_create_topic(publisher, self.config)
            try:
                future = publisher.publish(topic_path, bytes(payload))
                message_id = future.result()
            except Exception as e:
                log_error(
                    f"Failed to publish to topic {self.config.topic_name}: {e}",
                    topic=self.config.topic_name,
                    exc_info=True,
                )
                raise PublishError(
                    f"Failed to publish to topic {self.config.topic_name}: {e}"
                ) from e
        finally:
            publisher.stop()

        log_info(
            f"Published ID '{message_id}' to GCP PubSub message queue.",
            topic=self.config.topic_name,
            message_id=message_id,
        )
        return message_id

    def subscribe(
        self,
        handler: MessageHandler,
        timeout: Optional[float] = None,
        flow_control: Optional[pubsub_v1.types.FlowControl] = None,
    ) -> None:
        """
        Receive messages from the configured subscription until cancelled.

        Blocks the calling thread. handler(ctx, message) runs on the client
        library's callback threads, possibly concurrently, and must ack or
        nack each message. Call ctx.cancel() to stop the loop.

        Config needed: project_id, credentials_file, topic_name, create_topic,
        subscription_name, create_subscription

        Args:
            handler: Called as handler(ctx, message) for every message
            timeout: Stop receiving after this many seconds. None means no limit.
            flow_control: Optional client-side flow control settings

        Raises:
            ClientInitError: Client could not be created
            SubscriptionUnavailable: Subscription missing and create_subscription is False
            TopicUnavailable: Topic missing while creating the subscription
            CreateError: Topic or subscription creation was rejected
            ReceiveError: Streaming pull failed
        """
        log_info("Subscribe to GCP PubSub message queue.")

        subscriber = self._client_factory.subscriber(self.config.credentials_file)
        try:
            subscription_path = self._resolve_subscription(subscriber)
            ctx = ReceiveContext(subscription_path)

            def callback(message: Any) -> None:
                try:
                    handler(ctx, message)
                except Exception:
                    # The client library nacks the message after this
                    log_error(
                        f"Handler failed for message {getattr(message, 'message_id', '')}",
                        subscription=self.config.subscription_name,
                        exc_info=True,
                    )
                    raise

            streaming_pull_future = subscriber.subscribe(
                subscription_path, callback=callback, **_subscribe_kwargs(flow_control)
            )
            ctx.attach(streaming_pull_future)
            log_info(
                f"Listening for messages on {subscription_path}",
                subscription=self.config.subscription_name,
            )

            try:
                streaming_pull_future.result(timeout=timeout)
            except FutureTimeoutError:
                ctx.cancel()
                _await_shutdown(streaming_pull_future, subscription_path)
            except KeyboardInterrupt:
                ctx.cancel()
                _await_shutdown(streaming_pull_future, subscription_path)
                raise
            except Exception as e:
                # A failed future does not stop the stream manager by itself
                ctx.cancel()
                log_error(
                    f"Receiving from {subscription_path} failed: {e}",
                    subscription=self.config.subscription_name,
                    exc_info=True,
                )
                raise ReceiveError(f"Receiving from {subscription_path} failed: {e}") from e
        finally:
            subscriber.close()

    def iter_messages(
        self,
        max_pending: int = 100,
        timeout: Optional[float] = None,
        flow_control: Optional[pubsub_v1.types.FlowControl] = None,
    ) -> Iterator[Any]:
        """
        Yield messages from the configured subscription.

        Messages are buffered in a queue of at most max_pending entries; when
        it is full, delivery blocks until the caller catches up. Closing the
        generator cancels the stream and nacks whatever is still buffered.
        The caller must ack or nack every yielded message.

        Args:
            max_pending: Size of the delivery buffer
            timeout: Stop after this many seconds. None means no limit.
            flow_control: Optional client-side flow control settings

        Raises:
            Same errors as subscribe().
        """
        subscriber = self._client_factory.subscriber(self.config.credentials_file)
        try:
            subscription_path = self._resolve_subscription(subscriber)
            ctx = ReceiveContext(subscription_path)
            buffer: "queue.Queue[Any]" = queue.Queue(maxsize=max_pending)

            def callback(message: Any) -> None:
                while not ctx.cancelled:
                    try:
                        buffer.put(message, timeout=_POLL_INTERVAL_SECONDS)
                    except queue.Full:
                        continue
                    if ctx.cancelled:
                        # Cancelled while putting; the closing drain may have missed it
                        _nack_pending(buffer)
                    return
                message.nack()

            streaming_pull_future = subscriber.subscribe(
                subscription_path, callback=callback, **_subscribe_kwargs(flow_control)
            )
            ctx.attach(streaming_pull_future)
            deadline = None if timeout is None else time.monotonic() + timeout

            try:
                while deadline is None or time.monotonic() < deadline:
                    try:
                        message = buffer.get(timeout=_POLL_INTERVAL_SECONDS)
                    except queue.Empty:
                        if streaming_pull_future.done():
                            _raise_if_failed(streaming_pull_future, subscription_path)
                            return
                        continue
                    yield message
            finally:
                ctx.cancel()
                _nack_pending(buffer)
        finally:
            subscriber.close()

    def _resolve_subscription(self, subscriber: Any) -> str:
        """Resolve (or create) the subscription; the publisher is only needed for topic creation."""
        publisher = self._client_factory.publisher(self.config.credentials_file)
        try:
            return resolve_or_create_subscription(subscriber, publisher, self.config)
        finally:
            publisher.stop()


def _await_shutdown(streaming_pull_future: Any, subscription_path: str) -> None:
    """Block until a cancelled stream has shut down."""
    try:
        streaming_pull_future.result()
    except Exception as e:
        log_error(f"Stream on {subscription_path} failed while shutting down: {e}")
        raise ReceiveError(
            f"Stream on {subscription_path} failed while shutting down: {e}"
        ) from e


def _subscribe_kwargs(flow_control: Optional[pubsub_v1.types.FlowControl]) -> dict:
    if flow_control is None:
        return {}
    return {"flow_control": flow_control}


def _raise_if_failed(streaming_pull_future: Any, subscription_path: str) -> None:
    error = streaming_pull_future.exception()
    if error is None:
        return
    log_error(f"Receiving from {subscription_path} failed: {error}")
    raise ReceiveError(f"Receiving from {subscription_path} failed: {error}") from error


def _nack_pending(buffer: "queue.Queue[Any]") -> None:
    nacked = 0
    while True:
        try:
            buffer.get_nowait().nack()
        except queue.Empty:
            break
        nacked += 1
    if nacked:
        log_warning(f"Stream closed with {nacked} undelivered message(s), nacked them")


def new_gcp_queue() -> GCPQueue:
    """Create a GCPQueue configured from the environment."""
    return GCPQueue.from_env()


# Singleton instance
_gcp_queue: Optional[GCPQueue] = None


def get_gcp_queue() -> GCPQueue:
    """Get the singleton GCPQueue instance."""
    global _gcp_queue
    if _gcp_queue is None:
        _gcp_queue = new_gcp_queue()
    return _gcp_queue
