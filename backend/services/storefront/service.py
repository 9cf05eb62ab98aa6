"""
Storefront service - creates and reads products in the WooCommerce store.

Products are opaque to the rest of the system: only the id travels through
the claim queue; the other fields are shown back to the editor.
"""
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from django.utils.html import strip_tags
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')
_BLANK_LINES = re.compile(r'\n{3,}')


class StorefrontError(Exception):
    """Store refused or failed to handle a request. Message is user-facing."""


class ProductDraft(BaseModel):
    """Sanitized input for a new product."""

    name: str
    price: float
    description: str = ''

    @field_validator('name', mode='before')
    @classmethod
    def _clean_name(cls, value: Any) -> str:
        text = strip_tags(str(value or ''))
        text = _WHITESPACE.sub(' ', text).strip()
        if not text:
            raise ValueError('Product name is required.')
        return text

    @field_validator('price', mode='before')
    @classmethod
    def _clean_price(cls, value: Any) -> float:
        try:
            price = float(value)
        except (TypeError, ValueError):
            price = 0.0
        if not price > 0:
            raise ValueError('Product price must be greater than 0.')
        return price

    @field_validator('description', mode='before')
    @classmethod
    def _clean_description(cls, value: Any) -> str:
        text = strip_tags(str(value or '')).replace('\r\n', '\n')
        return _BLANK_LINES.sub('\n\n', text).strip()


@dataclass
class ProductRecord:
    """Product as reported back by the store."""
    id: int
    name: str
    price: str
    permalink: str
    edit_url: str
    description: str = ''

    def as_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.id,
            'product_name': self.name,
            'product_price': self.price,
            'product_url': self.permalink,
            'edit_url': self.edit_url,
            'product_description': self.description,
        }


class Storefront(ABC):

    @abstractmethod
    def create_product(self, draft: ProductDraft) -> ProductRecord:
        """Create a published simple product. Raises StorefrontError."""
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        """Fetch a product, None if the store no longer has it."""
        pass

    def is_configured(self) -> bool:
        return True


class WooCommerceStorefront(Storefront):
    """
    WooCommerce REST API (wc/v3) client.

    Authenticates with consumer key/secret over HTTP basic auth.
    """

    CREATE_FAILED = "Failed to create product. Please try again."
    MISSING_ID = "Product was created but ID is missing. Please check WooCommerce."

    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self._base_url = base_url.rstrip('/')
        self._auth = (consumer_key, consumer_secret)
        self._timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._base_url and self._auth[0] and self._auth[1])

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=f"{self._base_url}/wp-json/wc/v3",
            auth=self._auth,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _edit_url(self, product_id: int) -> str:
        return f"{self._base_url}/wp-admin/post.php?post={product_id}&action=edit"

    def _to_record(self, data: Dict[str, Any]) -> ProductRecord:
        product_id = int(data['id'])
        return ProductRecord(
            id=product_id,
            name=data.get('name', ''),
            price=str(data.get('price', '')),
            permalink=data.get('permalink', ''),
            edit_url=self._edit_url(product_id),
            description=data.get('description', ''),
        )

    def create_product(self, draft: ProductDraft) -> ProductRecord:
        payload = {
            'name': draft.name,
            'type': 'simple',
            'regular_price': str(draft.price),
            'status': 'publish',
            'catalog_visibility': 'visible',
            'manage_stock': False,
        }
        if draft.description:
            payload['description'] = draft.description

        try:
            with self._client() as client:
                response = client.post('/products', json=payload)
        except httpx.HTTPError as e:
            logger.error(f"WooCommerce request failed: {e}")
            raise StorefrontError(self.CREATE_FAILED) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = data.get('message') if isinstance(data, dict) else None
            logger.error(f"WooCommerce API error: {response.status_code} - {response.text}")
            raise StorefrontError(message or self.CREATE_FAILED)

        if not isinstance(data, dict) or not data.get('id'):
            raise StorefrontError(self.MISSING_ID)

        return self._to_record(data)

    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        try:
            with self._client() as client:
                response = client.get(f'/products/{product_id}')
        except httpx.HTTPError as e:
            logger.error(f"WooCommerce request for product {product_id} failed: {e}")
            return None

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.error(f"WooCommerce API error: {response.status_code} - {response.text}")
            return None

        return self._to_record(response.json())


class FakeStorefront(Storefront):
    """
    In-memory store for tests and local development.
    Ids are handed out sequentially starting at `first_id`.
    """

    def __init__(self, first_id: int = 501, base_url: str = 'http://shop.test'):
        self._next_id = first_id
        self._base_url = base_url
        self._products: Dict[int, ProductRecord] = {}
        self.fail_with: Optional[str] = None

    def create_product(self, draft: ProductDraft) -> ProductRecord:
        if self.fail_with is not None:
            raise StorefrontError(self.fail_with)

        product_id = self._next_id
        self._next_id += 1
        record = ProductRecord(
            id=product_id,
            name=draft.name,
            price=f"{draft.price:g}",
            permalink=f"{self._base_url}/product/{product_id}/",
            edit_url=f"{self._base_url}/wp-admin/post.php?post={product_id}&action=edit",
            description=draft.description,
        )
        self._products[product_id] = record
        return record

    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        return self._products.get(product_id)

    def remove_product(self, product_id: int) -> None:
        self._products.pop(product_id, None)

    @property
    def products(self) -> Dict[int, ProductRecord]:
        return dict(self._products)
