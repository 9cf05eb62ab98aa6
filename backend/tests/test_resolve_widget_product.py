"""
Tests for ResolveWidgetProductCommand (widget render).
"""
import pytest

from infrastructure.cache import FakeCache
from infrastructure.event_bus import DomainEvent
from services.claims import AssignmentResolver, AssignmentStore, FakeAssignmentStore, ProductQueue
from services.commands import ResolveWidgetProductCommand
from services.commands.resolve_widget_product import (
    EMPTY,
    EMPTY_EDITOR_MESSAGE,
    EMPTY_FRONTEND_MESSAGE,
    EMPTY_TITLE,
    NO_CONTAINER,
    POPULATED,
)
from services.errors import ErrorKind
from services.storefront import ProductDraft

pytestmark = pytest.mark.django_db


@pytest.fixture
def command(container):
    return container.get(ResolveWidgetProductCommand)


@pytest.fixture
def created_product(storefront, product_queue, editor):
    """A product made in the editor and waiting in the editor's queue."""
    record = storefront.create_product(ProductDraft(name='Lamp', price=25))
    product_queue.enqueue(editor.id, record.id)
    return record


class TestPopulated:

    def test_first_render_claims_product(self, command, editor, created_product, event_bus):
        """Should show the queued product and announce the claim."""
        result = command.execute('42', 'a1b2', editor.id, is_editor=True)

        assert result.success is True
        assert result.state == POPULATED
        assert result.product_id == created_product.id
        assert result.product['product_name'] == 'Lamp'

        event = event_bus.assert_event_published(DomainEvent.ASSIGNMENT_CLAIMED)
        assert event['payload']['product_id'] == created_product.id
        assert event['payload']['container_id'] == '42'
        assert event['payload']['widget_id'] == 'a1b2'

    def test_later_renders_reuse_without_event(self, command, editor, created_product, event_bus):
        """Should not publish again for an existing assignment."""
        command.execute('42', 'a1b2', editor.id)
        event_bus.clear()

        result = command.execute('42', 'a1b2', 0)

        assert result.state == POPULATED
        assert result.product_id == created_product.id
        event_bus.assert_no_events()


class TestEmpty:

    def test_editor_sees_create_hint(self, command, editor):
        result = command.execute('42', 'a1b2', editor.id, is_editor=True)

        assert result.state == EMPTY
        assert result.product_id is None
        assert result.title == EMPTY_TITLE
        assert result.message == EMPTY_EDITOR_MESSAGE

    def test_visitor_sees_neutral_message(self, command):
        result = command.execute('42', 'a1b2', 0)

        assert result.state == EMPTY
        assert result.message == EMPTY_FRONTEND_MESSAGE

    def test_product_deleted_from_store(self, command, editor, created_product, storefront):
        """Should keep the assignment but render the empty state."""
        command.execute('42', 'a1b2', editor.id)
        storefront.remove_product(created_product.id)

        result = command.execute('42', 'a1b2', editor.id)

        assert result.success is True
        assert result.state == EMPTY
        assert result.product_id == created_product.id


class TestFailures:

    def test_no_container(self, command, editor, created_product, product_queue):
        result = command.execute(None, 'a1b2', editor.id)

        assert result.success is True
        assert result.state == NO_CONTAINER
        assert product_queue.pending(editor.id) == [created_product.id]

    def test_assignment_write_failure(self, container, command, editor, created_product):
        """Should report the failed write as an error result."""
        store = container.get(AssignmentStore)

        def broken_claim(container_id, widget_id, product_id):
            raise RuntimeError('database is down')

        store.claim = broken_claim

        result = command.execute('42', 'a1b2', editor.id)

        assert result.success is False
        assert result.error_code == ErrorKind.ASSIGNMENT_WRITE_FAILED


class UnreachableCache(FakeCache):
    """Cache that cannot be reached at all."""

    def get(self, key):
        raise ConnectionError('redis down')


class TestQueueFailure:

    def test_cache_outage_is_a_result(self, container):
        """Should report the outage instead of raising."""
        queue = ProductQueue(UnreachableCache())
        container.register_singleton(AssignmentResolver, AssignmentResolver(queue, FakeAssignmentStore()))
        command = container.get(ResolveWidgetProductCommand)

        result = command.execute('42', 'a1b2', 7)

        assert result.success is False
        assert result.error_code == ErrorKind.QUEUE_UNAVAILABLE
