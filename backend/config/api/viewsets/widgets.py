"""
Widgets ViewSet - render-time product lookup.

- POST /widgets/resolve
- GET  /widgets/assignment
"""
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny

from .base import BaseViewSet
from config.api.contracts.widgets import ResolveWidgetRequest, WidgetAssignmentRequest
from services.commands import ResolveWidgetProductCommand
from services.queries import GetWidgetAssignmentQuery


class WidgetsViewSet(BaseViewSet):
    """Which product a widget instance shows."""

    # Pages are also rendered for anonymous visitors
    permission_classes = [AllowAny]

    @action(detail=False, methods=['post'])
    def resolve(self, request):
        """
        Product for a widget render; claims one on first render
        POST /widgets/resolve
        """
        data, error = self.validate_request(ResolveWidgetRequest, request.data)
        if error:
            return error

        command = self.get_command(ResolveWidgetProductCommand)
        result = command.execute(
            container_id=data.container_id,
            widget_id=data.widget_id,
            user_id=self.acting_user_id(request),
            is_editor=data.is_editor,
        )

        if not result.success:
            return self.failure(result.error, result.error_code)

        return self.success({
            'state': result.state,
            'product_id': result.product_id,
            'product': result.product,
            'title': result.title,
            'message': result.message,
        })

    @action(detail=False, methods=['get'])
    def assignment(self, request):
        """
        Existing assignment of a widget, never claims
        GET /widgets/assignment?container_id=..&widget_id=..
        """
        data, error = self.validate_request(WidgetAssignmentRequest, request.query_params.dict())
        if error:
            return error

        query = self.get_query(GetWidgetAssignmentQuery)
        result = query.execute(container_id=data.container_id, widget_id=data.widget_id)

        return self.success({
            'assigned': result.found,
            'product_id': result.product_id,
        })
