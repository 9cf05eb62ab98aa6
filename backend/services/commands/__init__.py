# Commands package (Write operations)
from .base import BaseCommand
from .create_product import CreateProductCommand, CreateProductResult
from .resolve_widget_product import ResolveWidgetProductCommand, WidgetRenderResult

__all__ = [
    'BaseCommand',
    'CreateProductCommand',
    'CreateProductResult',
    'ResolveWidgetProductCommand',
    'WidgetRenderResult',
]
