"""
Product claim queue and widget assignment resolution.
"""
from .queue import ProductQueue, QueueContentionError, queue_key
from .assignments import AssignmentStore, DjangoAssignmentStore, FakeAssignmentStore, assignment_key
from .resolver import AssignmentResolver, ResolveResult, ResolveStatus

__all__ = [
    'ProductQueue',
    'QueueContentionError',
    'queue_key',
    'AssignmentStore',
    'DjangoAssignmentStore',
    'FakeAssignmentStore',
    'assignment_key',
    'AssignmentResolver',
    'ResolveResult',
    'ResolveStatus',
]
