"""
Editor request security: nonces and capability checks.
"""
from .service import NonceService, can_edit_products, CREATE_PRODUCT_ACTION, EDIT_PRODUCTS_PERMISSION

__all__ = ['NonceService', 'can_edit_products', 'CREATE_PRODUCT_ACTION', 'EDIT_PRODUCTS_PERMISSION']
