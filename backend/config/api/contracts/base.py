"""
Shared API contracts.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error response."""
    success: bool = False
    error: str
    code: str
    details: Optional[Dict[str, Any]] = None
