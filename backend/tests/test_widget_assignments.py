"""
Tests for the database-backed assignment store and the widgets app checks.
"""
import pytest
from django.db import IntegrityError

from apps.widgets.checks import check_storefront_configured
from apps.widgets.models import WidgetAssignment
from services.claims import DjangoAssignmentStore, assignment_key


@pytest.mark.django_db
class TestDjangoAssignmentStore:
    """Tests for DjangoAssignmentStore"""

    def test_missing_assignment(self):
        assert DjangoAssignmentStore().get('42', 'a1b2') is None

    def test_claim_stores_row(self):
        store = DjangoAssignmentStore()

        assert store.claim('42', 'a1b2', 501) == 501

        row = WidgetAssignment.objects.get()
        assert row.key == 'assignment:42:a1b2'
        assert row.container_id == '42'
        assert row.widget_id == 'a1b2'
        assert row.product_id == 501
        assert store.get('42', 'a1b2') == 501

    def test_claim_is_write_once(self):
        """Should keep the first product for a widget."""
        store = DjangoAssignmentStore()
        store.claim('42', 'a1b2', 501)

        assert store.claim('42', 'a1b2', 502) == 501
        assert WidgetAssignment.objects.count() == 1

    def test_same_widget_id_on_other_container(self):
        """Should treat (container, widget) as the identity."""
        store = DjangoAssignmentStore()
        store.claim('42', 'a1b2', 501)
        store.claim('43', 'a1b2', 502)

        assert store.get('42', 'a1b2') == 501
        assert store.get('43', 'a1b2') == 502

    def test_ids_containing_colons_stay_distinct(self):
        """Should key on the pair, not on the rendered key."""
        store = DjangoAssignmentStore()

        assert store.claim('page:1', 'w', 501) == 501
        assert store.claim('page', '1:w', 502) == 502

        assert store.get('page:1', 'w') == 501
        assert store.get('page', '1:w') == 502
        assert WidgetAssignment.objects.count() == 2

    def test_database_rejects_second_row_for_widget(self):
        WidgetAssignment.objects.create(
            key=assignment_key('42', 'a1b2'), container_id='42', widget_id='a1b2', product_id=501
        )

        with pytest.raises(IntegrityError):
            WidgetAssignment.objects.create(
                key=assignment_key('42', 'a1b2'), container_id='42', widget_id='a1b2', product_id=502
            )


class TestStorefrontCheck:
    """Tests for the widgets.W001 system check"""

    def test_silent_with_fakes(self, settings):
        settings.USE_FAKES = True
        assert check_storefront_configured(None) == []

    def test_warns_when_store_is_missing(self, settings):
        settings.USE_FAKES = False
        settings.WOOCOMMERCE_URL = 'https://shop.example.com'
        settings.WOOCOMMERCE_CONSUMER_KEY = ''
        settings.WOOCOMMERCE_CONSUMER_SECRET = ''

        messages = check_storefront_configured(None)

        assert [m.id for m in messages] == ['widgets.W001']
        assert 'WOOCOMMERCE_CONSUMER_KEY' in messages[0].hint
        assert 'WOOCOMMERCE_URL' not in messages[0].hint

    def test_silent_when_configured(self, settings):
        settings.USE_FAKES = False
        settings.WOOCOMMERCE_URL = 'https://shop.example.com'
        settings.WOOCOMMERCE_CONSUMER_KEY = 'ck_live'
        settings.WOOCOMMERCE_CONSUMER_SECRET = 'cs_live'

        assert check_storefront_configured(None) == []
