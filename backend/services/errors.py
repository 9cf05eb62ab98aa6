"""
Error kinds returned by commands and services in their result objects.
"""
from enum import Enum


class ErrorKind(str, Enum):
    SECURITY_CHECK_FAILED = 'SECURITY_CHECK_FAILED'
    PERMISSION_DENIED = 'PERMISSION_DENIED'
    VALIDATION_FAILED = 'VALIDATION_FAILED'
    CREATION_FAILED = 'CREATION_FAILED'
    NO_CONTAINER_IDENTITY = 'NO_CONTAINER_IDENTITY'
    # Product left the queue but its assignment could not be stored
    ASSIGNMENT_WRITE_FAILED = 'ASSIGNMENT_WRITE_FAILED'
    # Claim queue could not be read or written (cache down, swap retries exhausted)
    QUEUE_UNAVAILABLE = 'QUEUE_UNAVAILABLE'
