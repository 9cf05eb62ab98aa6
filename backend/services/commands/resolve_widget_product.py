"""
Resolve Widget Product Command - called on every widget render.

Claims a queued product for the widget on its first render and afterwards
keeps returning the same one. The result tells the caller which presentation
to show: a populated product card, the empty state, or nothing addressable.

POST /widgets/resolve
"""
from typing import Optional, Dict, Any
from dataclasses import dataclass

from infrastructure.event_bus import DomainEvent
from services.claims import AssignmentResolver, ResolveStatus
from services.errors import ErrorKind
from services.storefront import Storefront

from .base import BaseCommand

POPULATED = 'populated'
EMPTY = 'empty'
NO_CONTAINER = 'no_container'

EMPTY_TITLE = "No product yet"
EMPTY_EDITOR_MESSAGE = "Please create a product from the popup to display it in this widget."
EMPTY_FRONTEND_MESSAGE = "This widget is not linked to any product yet."


@dataclass
class WidgetRenderResult:
    """What a widget should show."""
    success: bool
    state: Optional[str] = None
    product_id: Optional[int] = None
    product: Optional[Dict[str, Any]] = None
    title: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[ErrorKind] = None


class ResolveWidgetProductCommand(BaseCommand[WidgetRenderResult]):

    def __init__(self, resolver: AssignmentResolver, storefront: Storefront, **kwargs):
        super().__init__(**kwargs)
        self._resolver = resolver
        self._storefront = storefront

    def execute(
        self,
        container_id: Optional[str],
        widget_id: str,
        user_id: int,
        is_editor: bool = False
    ) -> WidgetRenderResult:
        try:
            result = self._resolver.resolve(container_id, widget_id, user_id)
        except Exception as e:
            self.log_error(
                "Widget product could not be resolved",
                user_id=user_id,
                container_id=str(container_id),
                widget_id=str(widget_id),
                reason=str(e)
            )
            return WidgetRenderResult(
                success=False,
                error="The product for this widget could not be loaded. Please try again.",
                error_code=ErrorKind.QUEUE_UNAVAILABLE
            )

        if result.status == ResolveStatus.FAILED:
            return WidgetRenderResult(
                success=False,
                error=result.error,
                error_code=result.error_code
            )

        if result.status == ResolveStatus.NO_CONTAINER:
            return WidgetRenderResult(success=True, state=NO_CONTAINER)

        if result.claimed:
            self.publish_event(DomainEvent.ASSIGNMENT_CLAIMED, {
                'product_id': result.product_id,
                'container_id': str(container_id),
                'widget_id': str(widget_id),
                'user_id': user_id,
            })

        product = None
        if result.status == ResolveStatus.ASSIGNED:
            product = self._storefront.get_product(result.product_id)
            if product is None:
                self.log_warning(
                    "Assigned product not found in store",
                    product_id=result.product_id,
                    container_id=str(container_id),
                    widget_id=str(widget_id)
                )

        if product is None:
            return WidgetRenderResult(
                success=True,
                state=EMPTY,
                product_id=result.product_id,
                title=EMPTY_TITLE,
                message=EMPTY_EDITOR_MESSAGE if is_editor else EMPTY_FRONTEND_MESSAGE
            )

        return WidgetRenderResult(
            success=True,
            state=POPULATED,
            product_id=product.id,
            product=product.as_dict()
        )
