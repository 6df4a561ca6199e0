"""Progresslog data models — pydantic v2."""

from progresslog.models.status import StepSnapshot, StepStatus

__all__ = [
    "StepStatus",
    "StepSnapshot",
]
