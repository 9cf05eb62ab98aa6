"""
Create Product Command - creates a store product from the editor popup and
queues it for the next widget the user renders.

POST /products
"""
from typing import Optional, Dict, Any
from dataclasses import dataclass

from pydantic import ValidationError

from infrastructure.event_bus import DomainEvent
from services.auth import NonceService, can_edit_products
from services.claims import ProductQueue
from services.errors import ErrorKind
from services.storefront import ProductDraft, Storefront, StorefrontError

from .base import BaseCommand


@dataclass
class CreateProductResult:
    """Result of creating a product."""
    success: bool
    product: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[ErrorKind] = None


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    cause = first.get('ctx', {}).get('error')
    return str(cause) if cause is not None else first['msg']


class CreateProductCommand(BaseCommand[CreateProductResult]):
    """
    Checks, in order: nonce, capability, input. Then creates the product and
    appends its id to the user's claim queue.
    """

    def __init__(
        self,
        storefront: Storefront,
        queue: ProductQueue,
        nonces: NonceService,
        **kwargs
    ):
        super().__init__(**kwargs)
        self._storefront = storefront
        self._queue = queue
        self._nonces = nonces

    def execute(
        self,
        user,
        nonce: Optional[str],
        product_name: Any = None,
        product_price: Any = None,
        product_description: Any = ''
    ) -> CreateProductResult:
        user_id = getattr(user, 'id', None) or 0

        if not self._nonces.verify(nonce, user_id):
            self.log_warning("Product creation rejected: bad nonce", user_id=user_id)
            return CreateProductResult(
                success=False,
                error="Security check failed. Please refresh the page and try again.",
                error_code=ErrorKind.SECURITY_CHECK_FAILED
            )

        if not can_edit_products(user):
            self.log_warning("Product creation rejected: missing capability", user_id=user_id)
            return CreateProductResult(
                success=False,
                error="You do not have permission to create products.",
                error_code=ErrorKind.PERMISSION_DENIED
            )

        try:
            draft = ProductDraft(
                name=product_name,
                price=product_price,
                description=product_description
            )
        except ValidationError as e:
            return CreateProductResult(
                success=False,
                error=_validation_message(e),
                error_code=ErrorKind.VALIDATION_FAILED
            )

        try:
            record = self._storefront.create_product(draft)
        except StorefrontError as e:
            self.log_error("Product creation failed in store", user_id=user_id, reason=str(e))
            return CreateProductResult(
                success=False,
                error=str(e),
                error_code=ErrorKind.CREATION_FAILED
            )

        try:
            self._queue.enqueue(user_id, record.id)
        except Exception as e:
            # The store already has the product; it will not be claimed by any widget
            self.log_error(
                "Created product could not be queued",
                user_id=user_id,
                product_id=record.id,
                reason=str(e)
            )
            return CreateProductResult(
                success=False,
                error="The product was created but could not be queued for a widget. Please try again.",
                error_code=ErrorKind.QUEUE_UNAVAILABLE
            )

        self.publish_event(DomainEvent.PRODUCT_CREATED, {
            'product_id': record.id,
            'user_id': user_id,
            'product_name': record.name,
        })

        self.log_info("Product created", product_id=record.id, user_id=user_id)

        return CreateProductResult(
            success=True,
            product=record.as_dict(),
            message="Product created successfully!"
        )
