"""
Base ViewSet for all API endpoints.
"""
from rest_framework import viewsets, status
from rest_framework.response import Response
from pydantic import ValidationError
from typing import Type, TypeVar, Optional, Tuple

from infrastructure.bootstrap import get_container
from config.api.contracts.base import ErrorResponse
from services.errors import ErrorKind

T = TypeVar('T')

ERROR_STATUS = {
    ErrorKind.SECURITY_CHECK_FAILED: status.HTTP_403_FORBIDDEN,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CREATION_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.ASSIGNMENT_WRITE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.QUEUE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class BaseViewSet(viewsets.ViewSet):
    """
    Base ViewSet with common functionality.

    Provides:
    - DI container access
    - Command/Query execution
    - Pydantic validation
    - Standard error responses
    """

    def get_container(self):
        """Get the DI container."""
        return get_container()

    def get_command(self, command_class: Type[T]) -> T:
        """Get a Command instance from the container."""
        return self.get_container().get(command_class)

    def get_query(self, query_class: Type[T]) -> T:
        """Get a Query instance from the container."""
        return self.get_container().get(query_class)

    def acting_user_id(self, request) -> int:
        """Authenticated user's id, 0 for anonymous visitors."""
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return 0
        return user.id

    def validate_request(
        self,
        request_model: Type[T],
        data: dict
    ) -> Tuple[Optional[T], Optional[Response]]:
        """
        Validate request data with Pydantic model.

        Returns:
            Tuple of (validated_model, None) on success
            Tuple of (None, error_response) on failure
        """
        try:
            return request_model(**data), None
        except ValidationError as e:
            return None, self.validation_error(e)

    def validation_error(self, error: ValidationError) -> Response:
        """Create validation error response."""
        return self.error(
            "Validation Error",
            ErrorKind.VALIDATION_FAILED.value,
            status.HTTP_400_BAD_REQUEST,
            details={'errors': error.errors(include_url=False, include_context=False)}
        )

    def success(self, data, status_code: int = status.HTTP_200_OK) -> Response:
        """Create success response."""
        return Response(data, status=status_code)

    def error(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict = None
    ) -> Response:
        """Create error response."""
        return Response(
            ErrorResponse(
                error=message,
                code=code,
                details=details
            ).model_dump(),
            status=status_code
        )

    def failure(self, message: str, error_code: ErrorKind) -> Response:
        """Error response for a failed command result."""
        return self.error(
            message,
            error_code.value,
            ERROR_STATUS.get(error_code, status.HTTP_400_BAD_REQUEST)
        )
