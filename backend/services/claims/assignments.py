"""
Durable widget -> product assignments.

An assignment is written once per (container, widget) pair and never changed
afterwards. `claim` returns whatever ends up stored, which is the earlier value
if another request wrote first.

The pair itself is the identity. `assignment_key` only renders it for display
and logs; ids may contain ':' so the rendered key is not unique.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple
import threading


def assignment_key(container_id: str, widget_id: str) -> str:
    return f"assignment:{container_id}:{widget_id}"


class AssignmentStore(ABC):

    @abstractmethod
    def get(self, container_id: str, widget_id: str) -> Optional[int]:
        """Product assigned to the widget, or None."""
        pass

    @abstractmethod
    def claim(self, container_id: str, widget_id: str, product_id: int) -> int:
        """
        Store `product_id` for the widget unless an assignment exists.
        Returns the stored product id.
        """
        pass


class DjangoAssignmentStore(AssignmentStore):
    """Assignments kept in the WidgetAssignment table."""

    def get(self, container_id: str, widget_id: str) -> Optional[int]:
        from apps.widgets.models import WidgetAssignment

        return (
            WidgetAssignment.objects
            .filter(container_id=container_id, widget_id=widget_id)
            .values_list('product_id', flat=True)
            .first()
        )

    def claim(self, container_id: str, widget_id: str, product_id: int) -> int:
        from django.db import IntegrityError, transaction
        from apps.widgets.models import WidgetAssignment

        try:
            with transaction.atomic():
                assignment, _ = WidgetAssignment.objects.get_or_create(
                    container_id=container_id,
                    widget_id=widget_id,
                    defaults={
                        'key': assignment_key(container_id, widget_id),
                        'product_id': product_id,
                    }
                )
        except IntegrityError:
            # Lost the insert race to a concurrent render of the same widget
            assignment = WidgetAssignment.objects.get(container_id=container_id, widget_id=widget_id)
        return assignment.product_id


class FakeAssignmentStore(AssignmentStore):
    """In-memory assignments for tests. Set `fail_with` to make claims raise."""

    def __init__(self):
        self._assignments: Dict[Tuple[str, str], int] = {}
        self._lock = threading.Lock()
        self.fail_with: Optional[Exception] = None

    def get(self, container_id: str, widget_id: str) -> Optional[int]:
        with self._lock:
            return self._assignments.get((container_id, widget_id))

    def claim(self, container_id: str, widget_id: str, product_id: int) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            return self._assignments.setdefault((container_id, widget_id), product_id)

    @property
    def assignments(self) -> Dict[Tuple[str, str], int]:
        with self._lock:
            return dict(self._assignments)
