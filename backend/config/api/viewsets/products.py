"""
Products ViewSet - editor popup endpoints.

- GET  /products/nonce
- POST /products
- GET  /products/pending
"""
from rest_framework import status
from rest_framework.decorators import action

from .base import BaseViewSet
from services.auth import NonceService
from services.commands import CreateProductCommand
from services.queries import GetPendingProductsQuery


class ProductsViewSet(BaseViewSet):
    """Product creation from the page builder editor."""

    @action(detail=False, methods=['get'])
    def nonce(self, request):
        """
        Data the editor needs before showing the product popup
        GET /products/nonce
        """
        nonces = self.get_container().get(NonceService)

        return self.success({
            'nonce': nonces.issue(request.user.id),
            'expires_in': nonces.ttl,
            'create_url': request.build_absolute_uri('/api/v1/products'),
        })

    def create(self, request):
        """
        Create a store product and queue it for the next widget
        POST /products
        """
        command = self.get_command(CreateProductCommand)

        result = command.execute(
            user=request.user,
            nonce=request.data.get('nonce') or request.META.get('HTTP_X_WIDGET_NONCE'),
            product_name=request.data.get('product_name'),
            product_price=request.data.get('product_price'),
            product_description=request.data.get('product_description', ''),
        )

        if not result.success:
            return self.failure(result.error, result.error_code)

        return self.success({
            'success': True,
            'message': result.message,
            **result.product,
        }, status_code=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        """
        Products created by the user that no widget has claimed yet
        GET /products/pending
        """
        query = self.get_query(GetPendingProductsQuery)
        result = query.execute(user_id=request.user.id)

        return self.success({
            'product_ids': result.product_ids,
            'count': len(result.product_ids),
            'expires_in': result.expires_in,
        })
