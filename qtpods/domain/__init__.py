"""
Domain layer for qtpods.

Contains pure domain objects with no I/O or side effects:
- Pod: A third-party dependency slot with descriptive metadata
- OperationResult: Tagged outcome of a pod operation

These objects provide serialization methods for JSONL output.
"""

from .pod import Pod, METADATA_FIELDS
from .operation import (
    OperationStatus,
    FailureKind,
    StepResult,
    PodOperationDetail,
    OperationResult,
)

__all__ = [
    'Pod',
    'METADATA_FIELDS',
    'OperationStatus',
    'FailureKind',
    'StepResult',
    'PodOperationDetail',
    'OperationResult',
]
