"""
Event Bus for domain events.

The set of events is fixed (`DomainEvent`). Handlers are registered when the
container is composed; a publish first hands the event to the transport
(RabbitMQ, in-process or fake) and then calls the registered handlers in
registration order.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List
import json
import logging
import threading
import time

logger = logging.getLogger(__name__)


class DomainEvent(str, Enum):
    PRODUCT_CREATED = 'product.created'
    ASSIGNMENT_CLAIMED = 'assignment.claimed'


EventHandler = Callable[[DomainEvent, Dict[str, Any]], None]


class EventBus(ABC):
    """Abstract event bus: transport plus local handler lists."""

    def __init__(self):
        self._handlers: Dict[DomainEvent, List[EventHandler]] = {
            event: [] for event in DomainEvent
        }

    def subscribe(self, event: DomainEvent, handler: EventHandler) -> None:
        """Register a handler for one event type."""
        self._handlers[DomainEvent(event)].append(handler)

    def handlers(self, event: DomainEvent) -> List[EventHandler]:
        return list(self._handlers[DomainEvent(event)])

    def publish(self, event: DomainEvent, payload: Dict[str, Any]) -> None:
        """
        Publish event.

        Args:
            event: One of DomainEvent
            payload: Event data (commands add 'timestamp' as Unix timestamp)

        Transport errors propagate to the caller. Handler errors are logged
        and do not stop the remaining handlers.
        """
        event = DomainEvent(event)
        self._send(event, payload)

        for handler in self._handlers[event]:
            try:
                handler(event, payload)
            except Exception as e:
                logger.error(
                    f"Handler {getattr(handler, '__name__', handler)} failed for {event.value}: {e}",
                    extra={'event_type': event.value}
                )

    @abstractmethod
    def _send(self, event: DomainEvent, payload: Dict[str, Any]) -> None:
        """Hand the event to the transport."""
        pass

    def close(self) -> None:
        pass


class InProcessEventBus(EventBus):
    """Event bus without a broker: only local handlers see events."""

    def _send(self, event: DomainEvent, payload: Dict[str, Any]) -> None:
        logger.debug(f"Event {event.value} dispatched in-process")


class RabbitMQEventBus(EventBus):
    """
    RabbitMQ implementation of event bus.

    Events go to a durable topic exchange with the event name as routing key
    ('product.created' -> 'product_created'). Reconnects on demand and retries
    a publish with exponential backoff before giving up.
    """

    MAX_RETRIES = 3
    INITIAL_RETRY_DELAY = 0.5  # seconds
    MAX_RETRY_DELAY = 5.0  # seconds

    def __init__(self, rabbitmq_url: str, exchange: str = 'widget_claims_events'):
        super().__init__()
        self._url = rabbitmq_url
        self._exchange = exchange
        self._connection = None
        self._channel = None
        self._lock = threading.Lock()

        try:
            with self._lock:
                self._connect()
        except Exception as e:
            # First publish will try again
            logger.warning(f"RabbitMQ not reachable on startup: {e}")

    def _is_open(self) -> bool:
        return (
            self._connection is not None and self._connection.is_open
            and self._channel is not None and self._channel.is_open
        )

    def _connect(self) -> None:
        """Open connection and declare the exchange. Caller holds the lock."""
        import pika

        if self._is_open():
            return

        self._disconnect()

        params = pika.URLParameters(self._url)
        params.heartbeat = 180
        params.blocked_connection_timeout = 300
        params.socket_timeout = 10

        self._connection = pika.BlockingConnection(params)
        self._channel = self._connection.channel()
        self._channel.exchange_declare(
            exchange=self._exchange,
            exchange_type='topic',
            durable=True
        )
        logger.info(f"RabbitMQ connection established (exchange={self._exchange})")

    def _disconnect(self) -> None:
        """Drop connection. Caller holds the lock."""
        connection, self._connection, self._channel = self._connection, None, None
        if connection is None:
            return
        try:
            if connection.is_open:
                connection.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing RabbitMQ connection: {e}")

    def _send(self, event: DomainEvent, payload: Dict[str, Any]) -> None:
        import pika

        body = json.dumps(
            {'event_type': event.value, 'payload': payload},
            ensure_ascii=False
        ).encode('utf-8')
        routing_key = event.value.replace('.', '_')

        last_error = None
        delay = self.INITIAL_RETRY_DELAY

        for attempt in range(1, self.MAX_RETRIES + 1):
            with self._lock:
                try:
                    self._connect()
                    self._channel.basic_publish(
                        exchange=self._exchange,
                        routing_key=routing_key,
                        body=body,
                        properties=pika.BasicProperties(
                            delivery_mode=2,  # Persistent
                            content_type='application/json'
                        )
                    )
                    logger.info(f"Published event: {event.value}")
                    return
                except Exception as e:
                    last_error = e
                    logger.warning(
                        f"Publish attempt {attempt}/{self.MAX_RETRIES} failed for {event.value}: {e}"
                    )
                    self._disconnect()

            if attempt < self.MAX_RETRIES:
                time.sleep(delay)
                delay = min(delay * 2, self.MAX_RETRY_DELAY)

        logger.error(f"Giving up on event {event.value} after {self.MAX_RETRIES} attempts")
        raise last_error

    def close(self) -> None:
        with self._lock:
            self._disconnect()

    def is_healthy(self) -> bool:
        with self._lock:
            return self._is_open()


class FakeEventBus(EventBus):
    """
    In-memory event bus for testing.
    Stores all published events for assertions.
    """

    def __init__(self):
        super().__init__()
        self._events: List[Dict[str, Any]] = []
        self.fail_with: Exception | None = None

    def _send(self, event: DomainEvent, payload: Dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self._events.append({
            'event_type': event.value,
            'payload': payload
        })

    @property
    def events(self) -> List[Dict[str, Any]]:
        """Get all published events."""
        return self._events.copy()

    def get_events_by_type(self, event: DomainEvent) -> List[Dict[str, Any]]:
        event_type = DomainEvent(event).value
        return [e for e in self._events if e['event_type'] == event_type]

    def clear(self) -> None:
        self._events.clear()

    def assert_event_published(self, event: DomainEvent) -> Dict[str, Any]:
        """Assert that an event of given type was published. Returns the event."""
        events = self.get_events_by_type(event)
        if not events:
            raise AssertionError(f"No event of type '{DomainEvent(event).value}' was published")
        return events[-1]

    def assert_no_events(self) -> None:
        if self._events:
            types = [e['event_type'] for e in self._events]
            raise AssertionError(f"Expected no events, but found: {types}")
