"""
Get Widget Assignment Query - looks up a widget's product without claiming.
"""
from typing import Optional
from dataclasses import dataclass

from services.claims import AssignmentStore

from .base import BaseQuery


@dataclass
class GetWidgetAssignmentResult:
    found: bool
    product_id: Optional[int] = None


class GetWidgetAssignmentQuery(BaseQuery[GetWidgetAssignmentResult]):

    def __init__(self, assignments: AssignmentStore, **kwargs):
        super().__init__(**kwargs)
        self._assignments = assignments

    def execute(self, container_id: str, widget_id: str) -> GetWidgetAssignmentResult:
        product_id = self._assignments.get(str(container_id), str(widget_id))
        return GetWidgetAssignmentResult(found=product_id is not None, product_id=product_id)
