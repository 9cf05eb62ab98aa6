# ViewSets package
from .base import BaseViewSet
from .products import ProductsViewSet
from .widgets import WidgetsViewSet

__all__ = [
    'BaseViewSet',
    'ProductsViewSet',
    'WidgetsViewSet',
]
