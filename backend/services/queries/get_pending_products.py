"""
Get Pending Products Query - products the user created that no widget has
claimed yet.
"""
from typing import List
from dataclasses import dataclass, field

from services.claims import ProductQueue

from .base import BaseQuery


@dataclass
class GetPendingProductsResult:
    product_ids: List[int] = field(default_factory=list)
    expires_in: int = 0


class GetPendingProductsQuery(BaseQuery[GetPendingProductsResult]):

    def __init__(self, queue: ProductQueue, **kwargs):
        super().__init__(**kwargs)
        self._queue = queue

    def execute(self, user_id: int) -> GetPendingProductsResult:
        product_ids = self._queue.pending(user_id)
        return GetPendingProductsResult(
            product_ids=product_ids,
            expires_in=self._queue.expires_in(user_id) if product_ids else 0
        )
