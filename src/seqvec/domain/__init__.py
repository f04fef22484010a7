"""Core domain models."""

from .models import (
    Record,
    VectorValue,
    ClusterModel,
    ClusterRecord,
    ContainerEntry,
)

__all__ = [
    "Record",
    "VectorValue",
    "ClusterModel",
    "ClusterRecord",
    "ContainerEntry",
]
