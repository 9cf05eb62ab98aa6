"""
Base Query class for CQRS read operations.
Queries have no side effects: they never move queue entries or write
assignments.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional
import logging

T = TypeVar('T')


class BaseQuery(ABC, Generic[T]):
    """
    Base class for all Queries (read operations).

    Queries:
    - Have NO side effects
    - Should be idempotent by nature
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        **kwargs  # Accept extra kwargs for DI compatibility
    ):
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def execute(self, **kwargs) -> T:
        """
        Execute the query.
        Must be implemented by subclasses.
        """
        pass

    def log_info(self, message: str, **extra) -> None:
        """Log info message with extra fields."""
        self._logger.info(message, extra=extra)
