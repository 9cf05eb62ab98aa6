"""
Dependency Injection container and application bootstrap.

The container is built once per process by `start_container()` (called from
the widgets app's `ready()` hook) and torn down by `stop_container()`.
Request handlers reach it through `get_container()`.
"""
from typing import TypeVar, Type, Dict, Any, Optional
import atexit
import logging

from infrastructure.clock import Clock, SystemClock, FakeClock
from infrastructure.cache import Cache, RedisCache, FakeCache
from infrastructure.event_bus import (
    DomainEvent,
    EventBus,
    FakeEventBus,
    InProcessEventBus,
    RabbitMQEventBus,
)

T = TypeVar('T')

logger = logging.getLogger(__name__)


def log_domain_event(event: DomainEvent, payload: Dict[str, Any]) -> None:
    """Audit trail of every domain event."""
    logging.getLogger('widget_claims.events').info(
        f"Domain event {event.value}",
        extra={'event_type': event.value, **{k: v for k, v in payload.items() if k != 'timestamp'}}
    )


class Container:
    """
    Simple DI container for managing dependencies.
    Provides both real and fake implementations.
    """

    def __init__(self, use_fakes: bool = False, config: Optional[Dict[str, Any]] = None):
        self._use_fakes = use_fakes
        self._config = config if config is not None else _config_from_settings()
        self._singletons: Dict[Type, Any] = {}

        self._register_infrastructure()
        self._register_services()
        self._register_event_handlers()

    @property
    def use_fakes(self) -> bool:
        return self._use_fakes

    def _register_infrastructure(self):
        """Register infrastructure components."""
        from services.claims import DjangoAssignmentStore
        from services.claims.assignments import AssignmentStore
        from services.storefront import FakeStorefront, Storefront, WooCommerceStorefront

        cfg = self._config

        # Assignments live in the application database in every mode
        self._singletons[AssignmentStore] = DjangoAssignmentStore()

        if self._use_fakes:
            clock = FakeClock()
            self._singletons[Clock] = clock
            self._singletons[Cache] = FakeCache(clock=clock)
            self._singletons[EventBus] = FakeEventBus()
            self._singletons[Storefront] = FakeStorefront()
            return

        self._singletons[Clock] = SystemClock()
        self._singletons[Cache] = RedisCache(cfg['redis_url'])

        if cfg.get('rabbitmq_url'):
            self._singletons[EventBus] = RabbitMQEventBus(cfg['rabbitmq_url'], exchange=cfg['events_exchange'])
        else:
            self._singletons[EventBus] = InProcessEventBus()

        self._singletons[Storefront] = WooCommerceStorefront(
            base_url=cfg['woocommerce_url'],
            consumer_key=cfg['woocommerce_consumer_key'],
            consumer_secret=cfg['woocommerce_consumer_secret'],
            timeout=cfg['woocommerce_timeout'],
        )

    def _register_services(self):
        from services.auth import NonceService
        from services.claims import AssignmentResolver, ProductQueue
        from services.claims.assignments import AssignmentStore

        cfg = self._config

        queue = ProductQueue(
            self._singletons[Cache],
            ttl=cfg['queue_ttl'],
            max_swap_attempts=cfg['queue_max_swap_attempts'],
        )
        self._singletons[ProductQueue] = queue
        self._singletons[AssignmentResolver] = AssignmentResolver(queue, self._singletons[AssignmentStore])
        self._singletons[NonceService] = NonceService(
            cfg['secret_key'],
            self._singletons[Clock],
            ttl=cfg['nonce_ttl'],
        )

    def _register_event_handlers(self):
        event_bus = self._singletons[EventBus]
        for event in DomainEvent:
            event_bus.subscribe(event, log_domain_event)

    def get(self, cls: Type[T]) -> T:
        """
        Get instance of a class.

        For infrastructure and stateful services: returns singleton
        For Commands/Queries: creates new instance with injected dependencies
        """
        if cls in self._singletons:
            return self._singletons[cls]

        return self._create_service(cls)

    def _create_service(self, cls: Type[T]) -> T:
        """Create a command or query with the dependencies it asks for."""
        from services.auth import NonceService
        from services.claims import AssignmentResolver, ProductQueue
        from services.claims.assignments import AssignmentStore
        from services.storefront import Storefront

        return cls(
            clock=self._singletons[Clock],
            event_bus=self._singletons[EventBus],
            storefront=self._singletons[Storefront],
            queue=self._singletons[ProductQueue],
            assignments=self._singletons[AssignmentStore],
            resolver=self._singletons[AssignmentResolver],
            nonces=self._singletons[NonceService],
            logger=logging.getLogger(cls.__name__)
        )

    def register_singleton(self, cls: Type[T], instance: T) -> None:
        """Register a singleton instance."""
        self._singletons[cls] = instance

    def close(self) -> None:
        """Release broker and cache connections."""
        for cls in (EventBus, Cache):
            resource = self._singletons.get(cls)
            close = getattr(resource, 'close', None)
            if close is None:
                continue
            try:
                close()
            except Exception as e:
                logger.warning(f"Error while closing {cls.__name__}: {e}")


def _config_from_settings() -> Dict[str, Any]:
    from django.conf import settings

    return {
        'secret_key': settings.SECRET_KEY,
        'redis_url': settings.REDIS_URL,
        'rabbitmq_url': settings.RABBITMQ_URL,
        'events_exchange': settings.EVENTS_EXCHANGE,
        'queue_ttl': settings.CLAIM_QUEUE_TTL_SECONDS,
        'queue_max_swap_attempts': settings.CLAIM_QUEUE_MAX_SWAP_ATTEMPTS,
        'nonce_ttl': settings.EDITOR_NONCE_TTL_SECONDS,
        'woocommerce_url': settings.WOOCOMMERCE_URL,
        'woocommerce_consumer_key': settings.WOOCOMMERCE_CONSUMER_KEY,
        'woocommerce_consumer_secret': settings.WOOCOMMERCE_CONSUMER_SECRET,
        'woocommerce_timeout': settings.WOOCOMMERCE_TIMEOUT,
    }


_container: Optional[Container] = None
_atexit_registered = False


def start_container(use_fakes: Optional[bool] = None) -> Container:
    """Build the process container. Called once at application startup."""
    global _container, _atexit_registered

    if _container is not None:
        return _container

    if use_fakes is None:
        from django.conf import settings
        use_fakes = settings.USE_FAKES

    _container = Container(use_fakes=use_fakes)
    logger.info(f"Container initialized (use_fakes={use_fakes})")

    if not _atexit_registered:
        atexit.register(stop_container)
        _atexit_registered = True

    return _container


def stop_container() -> None:
    """Close the process container. Called at shutdown."""
    global _container

    container, _container = _container, None
    if container is not None:
        container.close()
        logger.info("Container closed")


def install_container(container: Container) -> None:
    """Replace the process container (tests)."""
    global _container
    _container = container


def get_container() -> Container:
    """Get the process container. Raises if the application was not started."""
    if _container is None:
        raise RuntimeError("Container not started; call start_container() during application startup")
    return _container


def create_test_container(config: Optional[Dict[str, Any]] = None) -> Container:
    """Create a container with fake implementations for testing."""
    return Container(use_fakes=True, config=config)
