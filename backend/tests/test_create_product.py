"""
Tests for CreateProductCommand (editor popup submission).
"""
import pytest

from infrastructure.cache import FakeCache
from infrastructure.event_bus import DomainEvent
from services.claims import ProductQueue
from services.commands import CreateProductCommand
from services.errors import ErrorKind


@pytest.fixture
def command(container):
    return container.get(CreateProductCommand)


@pytest.fixture
def valid_nonce(nonces, editor):
    return nonces.issue(editor.id)


class TestSecurityChecks:
    """Nonce and capability gates run before anything else."""

    def test_missing_nonce(self, command, editor, product_queue):
        """Should fail the security check without a nonce."""
        result = command.execute(user=editor, nonce=None, product_name='Lamp', product_price=10)

        assert result.success is False
        assert result.error_code == ErrorKind.SECURITY_CHECK_FAILED
        assert result.error == "Security check failed. Please refresh the page and try again."
        assert product_queue.pending(editor.id) == []

    def test_garbage_nonce(self, command, editor):
        """Should fail the security check for a token that does not verify."""
        result = command.execute(user=editor, nonce='not-a-token', product_name='Lamp', product_price=10)

        assert result.error_code == ErrorKind.SECURITY_CHECK_FAILED

    def test_nonce_of_another_user(self, command, editor, nonces):
        """Should not accept a nonce issued to someone else."""
        result = command.execute(
            user=editor,
            nonce=nonces.issue(editor.id + 1),
            product_name='Lamp',
            product_price=10
        )

        assert result.error_code == ErrorKind.SECURITY_CHECK_FAILED

    def test_nonce_for_another_action(self, command, editor, nonces):
        """Should bind the nonce to the product creation action."""
        result = command.execute(
            user=editor,
            nonce=nonces.issue(editor.id, action='delete_product'),
            product_name='Lamp',
            product_price=10
        )

        assert result.error_code == ErrorKind.SECURITY_CHECK_FAILED

    def test_expired_nonce(self, command, editor, valid_nonce, clock, nonces):
        """Should reject a nonce once its lifetime is over."""
        clock.advance_seconds(nonces.ttl)

        result = command.execute(user=editor, nonce=valid_nonce, product_name='Lamp', product_price=10)

        assert result.error_code == ErrorKind.SECURITY_CHECK_FAILED

    def test_security_runs_before_validation(self, command, editor):
        """Should report the security failure even when input is bad too."""
        result = command.execute(user=editor, nonce='bad', product_name='', product_price=0)

        assert result.error_code == ErrorKind.SECURITY_CHECK_FAILED

    def test_user_without_capability(self, command, stub_user, nonces, storefront):
        """Should refuse users lacking the edit products permission."""
        visitor = stub_user(id=9)

        result = command.execute(
            user=visitor,
            nonce=nonces.issue(visitor.id),
            product_name='Lamp',
            product_price=10
        )

        assert result.error_code == ErrorKind.PERMISSION_DENIED
        assert result.error == "You do not have permission to create products."
        assert storefront.products == {}


class TestValidation:
    """Input sanitizing and validation."""

    @pytest.mark.parametrize('name', ['', '   ', None, '<b></b>'])
    def test_name_required(self, command, editor, valid_nonce, name):
        """Should require a non-empty name after sanitizing."""
        result = command.execute(user=editor, nonce=valid_nonce, product_name=name, product_price=10)

        assert result.error_code == ErrorKind.VALIDATION_FAILED
        assert result.error == "Product name is required."

    @pytest.mark.parametrize('price', [0, -5, '0', 'abc', None, ''])
    def test_price_must_be_positive(self, command, editor, valid_nonce, price):
        """Should reject prices that are not greater than zero."""
        result = command.execute(user=editor, nonce=valid_nonce, product_name='Lamp', product_price=price)

        assert result.error_code == ErrorKind.VALIDATION_FAILED
        assert result.error == "Product price must be greater than 0."

    def test_input_is_sanitized(self, command, editor, valid_nonce, storefront):
        """Should strip markup and collapse whitespace in the name."""
        result = command.execute(
            user=editor,
            nonce=valid_nonce,
            product_name='  <em>Desk</em>\n   Lamp ',
            product_price='19.90',
            product_description='<script>x</script>Bright <b>and</b> warm'
        )

        assert result.success is True
        product = storefront.get_product(result.product['product_id'])
        assert product.name == 'Desk Lamp'
        assert product.description == 'xBright and warm'
        assert result.product['product_price'] == '19.9'


class TestCreateProduct:
    """Successful creation and downstream failures."""

    def test_creates_and_queues_product(self, command, editor, valid_nonce, product_queue, event_bus):
        """Should create the product, queue it and publish an event."""
        result = command.execute(
            user=editor,
            nonce=valid_nonce,
            product_name='Lamp',
            product_price=25,
            product_description='Warm light'
        )

        assert result.success is True
        assert result.message == "Product created successfully!"
        assert result.product['product_id'] == 501
        assert result.product['product_name'] == 'Lamp'
        assert result.product['edit_url'].endswith('/wp-admin/post.php?post=501&action=edit')
        assert product_queue.pending(editor.id) == [501]

        event = event_bus.assert_event_published(DomainEvent.PRODUCT_CREATED)
        assert event['payload']['product_id'] == 501
        assert event['payload']['user_id'] == editor.id
        assert 'timestamp' in event['payload']

    def test_products_queue_in_creation_order(self, command, editor, valid_nonce, product_queue):
        """Should append each new product at the tail of the queue."""
        for name in ('First', 'Second', 'Third'):
            command.execute(user=editor, nonce=valid_nonce, product_name=name, product_price=1)

        assert product_queue.pending(editor.id) == [501, 502, 503]

    def test_store_failure(self, command, editor, valid_nonce, storefront, product_queue, event_bus):
        """Should surface the store's message and queue nothing."""
        storefront.fail_with = 'Invalid or duplicated SKU.'

        result = command.execute(user=editor, nonce=valid_nonce, product_name='Lamp', product_price=25)

        assert result.success is False
        assert result.error_code == ErrorKind.CREATION_FAILED
        assert result.error == 'Invalid or duplicated SKU.'
        assert product_queue.pending(editor.id) == []
        event_bus.assert_no_events()

    def test_event_bus_outage_does_not_fail_command(self, command, editor, valid_nonce, event_bus, product_queue):
        """Should keep the created product when publishing fails."""
        event_bus.fail_with = ConnectionError('broker down')

        result = command.execute(user=editor, nonce=valid_nonce, product_name='Lamp', product_price=25)

        assert result.success is True
        assert product_queue.pending(editor.id) == [501]


class UnreachableCache(FakeCache):
    """Cache whose writes fail as if the server went away."""

    def compare_and_set(self, key, expected, value, ttl=3600):
        raise ConnectionError('redis down')


class TestQueueFailure:
    """Cache errors after the store created the product."""

    @pytest.fixture
    def command(self, container, clock):
        container.register_singleton(ProductQueue, ProductQueue(UnreachableCache(clock=clock)))
        return container.get(CreateProductCommand)

    def test_enqueue_failure_is_a_result(self, command, editor, valid_nonce, storefront, event_bus):
        """Should report the queue outage instead of raising."""
        result = command.execute(user=editor, nonce=valid_nonce, product_name='Mug', product_price='5')

        assert result.success is False
        assert result.error_code == ErrorKind.QUEUE_UNAVAILABLE
        assert list(storefront.products) == [501]
        event_bus.assert_no_events()

    def test_contention_is_a_result(self, container, clock, editor, valid_nonce):
        """Should turn exhausted swap retries into a result."""

        class LosingCache(FakeCache):
            def compare_and_set(self, key, expected, value, ttl=3600):
                return False

        container.register_singleton(ProductQueue, ProductQueue(LosingCache(clock=clock), max_swap_attempts=2))
        command = container.get(CreateProductCommand)

        result = command.execute(user=editor, nonce=valid_nonce, product_name='Mug', product_price='5')

        assert result.error_code == ErrorKind.QUEUE_UNAVAILABLE
