"""
Pytest configuration and fixtures for the widget claims tests.
"""
from datetime import datetime, timedelta, timezone

import pytest
from django.test import Client


class StubUser:
    """Stands in for a Django user where no database is needed."""

    is_authenticated = True

    def __init__(self, id: int, permissions=()):
        self.id = id
        self._permissions = set(permissions)

    def has_perm(self, perm: str) -> bool:
        return perm in self._permissions


@pytest.fixture(autouse=True)
def container():
    """Fresh fake-backed container for every test."""
    from infrastructure.bootstrap import create_test_container, get_container, install_container

    previous = get_container()
    test_container = create_test_container()
    install_container(test_container)
    yield test_container
    install_container(previous)


@pytest.fixture
def clock(container):
    from infrastructure.clock import Clock
    return container.get(Clock)


@pytest.fixture
def cache(container):
    from infrastructure.cache import Cache
    return container.get(Cache)


@pytest.fixture
def event_bus(container):
    from infrastructure.event_bus import EventBus
    return container.get(EventBus)


@pytest.fixture
def storefront(container):
    from services.storefront import Storefront
    return container.get(Storefront)


@pytest.fixture
def product_queue(container):
    from services.claims import ProductQueue
    return container.get(ProductQueue)


@pytest.fixture
def nonces(container):
    from services.auth import NonceService
    return container.get(NonceService)


@pytest.fixture
def stub_user():
    """Factory for in-memory users."""
    return StubUser


@pytest.fixture
def editor():
    """In-memory user allowed to create products."""
    from services.auth import EDIT_PRODUCTS_PERMISSION
    return StubUser(id=7, permissions=[EDIT_PRODUCTS_PERMISSION])


@pytest.fixture
def api_client():
    """Django test client for API requests."""
    return Client()


@pytest.fixture
def user(db):
    """Create a test user without product permissions."""
    from django.contrib.auth import get_user_model
    return get_user_model().objects.create_user(username='visitor', password='secret')


@pytest.fixture
def editor_user(db):
    """Create a test user allowed to create products."""
    from django.contrib.auth import get_user_model
    from django.contrib.auth.models import Permission

    user = get_user_model().objects.create_user(username='editor', password='secret')
    permission = Permission.objects.get(codename='edit_products', content_type__app_label='widgets')
    user.user_permissions.add(permission)
    return user


def _bearer(user) -> dict:
    import jwt
    from django.conf import settings

    now = datetime.now(tz=timezone.utc)
    payload = {
        'user_id': user.id,
        'exp': now + timedelta(days=1),
        'iat': now,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm='HS256')
    return {'HTTP_AUTHORIZATION': f'Bearer {token}'}


@pytest.fixture
def auth_headers(user):
    """Authorization headers for the user without permissions."""
    return _bearer(user)


@pytest.fixture
def editor_headers(editor_user):
    """Authorization headers for the editor."""
    return _bearer(editor_user)
