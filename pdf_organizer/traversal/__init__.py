"""Directory traversal module."""

from .engine import (
    TraversalEngine,
    TraversalSummary,
    FileCandidate,
    OrganizedFile,
    Extractor,
)

__all__ = [
    "TraversalEngine",
    "TraversalSummary",
    "FileCandidate",
    "OrganizedFile",
    "Extractor",
]
