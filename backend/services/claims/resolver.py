"""
Assignment Resolver - decides which product a widget instance shows.

Order of lookup:
1. durable assignment of the widget (read-only, repeatable)
2. head of the acting user's product queue, which is then stored as the
   widget's assignment

Which widget gets which queued product is decided purely by dequeue order:
whichever widget renders next takes the oldest pending product.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from services.claims.assignments import AssignmentStore
from services.claims.queue import ProductQueue
from services.errors import ErrorKind

logger = logging.getLogger(__name__)


class ResolveStatus(str, Enum):
    ASSIGNED = 'assigned'
    UNASSIGNED = 'unassigned'
    NO_CONTAINER = 'no_container'
    FAILED = 'failed'


@dataclass
class ResolveResult:
    """Outcome of resolving a widget's product."""
    status: ResolveStatus
    product_id: Optional[int] = None
    claimed: bool = False  # True only on the call that moved the product out of the queue
    error: Optional[str] = None
    error_code: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.status != ResolveStatus.FAILED


class AssignmentResolver:

    def __init__(self, queue: ProductQueue, assignments: AssignmentStore):
        self._queue = queue
        self._assignments = assignments

    def resolve(
        self,
        container_id: Optional[str],
        widget_id: str,
        user_id: int
    ) -> ResolveResult:
        if not container_id:
            return ResolveResult(
                status=ResolveStatus.NO_CONTAINER,
                error_code=ErrorKind.NO_CONTAINER_IDENTITY
            )

        container_id = str(container_id)
        widget_id = str(widget_id)

        product_id = self._assignments.get(container_id, widget_id)
        if product_id is not None:
            return ResolveResult(status=ResolveStatus.ASSIGNED, product_id=product_id)

        product_id = self._queue.dequeue_head(user_id)
        if product_id is None:
            return ResolveResult(status=ResolveStatus.UNASSIGNED)

        log_extra = {
            'user_id': user_id,
            'product_id': product_id,
            'container_id': container_id,
            'widget_id': widget_id,
        }

        try:
            stored = self._assignments.claim(container_id, widget_id, product_id)
        except Exception as e:
            # The product is already out of the queue; it is not put back.
            logger.error(f"Failed to store assignment, product {product_id} is lost: {e}", extra=log_extra)
            return ResolveResult(
                status=ResolveStatus.FAILED,
                error="Could not save the product assignment for this widget.",
                error_code=ErrorKind.ASSIGNMENT_WRITE_FAILED
            )

        if stored != product_id:
            logger.warning(
                f"Widget was assigned concurrently, product {product_id} is lost",
                extra={**log_extra, 'stored_product_id': stored}
            )
            return ResolveResult(status=ResolveStatus.ASSIGNED, product_id=stored)

        logger.info("Product assigned to widget", extra=log_extra)
        return ResolveResult(status=ResolveStatus.ASSIGNED, product_id=product_id, claimed=True)
