# Queries package (Read operations)
from .base import BaseQuery
from .get_pending_products import GetPendingProductsQuery, GetPendingProductsResult
from .get_widget_assignment import GetWidgetAssignmentQuery, GetWidgetAssignmentResult

__all__ = [
    'BaseQuery',
    'GetPendingProductsQuery',
    'GetPendingProductsResult',
    'GetWidgetAssignmentQuery',
    'GetWidgetAssignmentResult',
]
