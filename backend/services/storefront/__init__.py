"""
WooCommerce storefront access.
"""
from .service import (
    FakeStorefront,
    ProductDraft,
    ProductRecord,
    Storefront,
    StorefrontError,
    WooCommerceStorefront,
)

__all__ = [
    'FakeStorefront',
    'ProductDraft',
    'ProductRecord',
    'Storefront',
    'StorefrontError',
    'WooCommerceStorefront',
]
