"""Pipeline phases for building parse graphs from files."""

from .building import GraphBuildPhase
from .ingestion import ParseResultIngestionPhase
from .validation import GraphValidationPhase

__all__ = [
    "ParseResultIngestionPhase",
    "GraphBuildPhase",
    "GraphValidationPhase",
]
