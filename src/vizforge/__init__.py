"""vizforge - compile visualization metadata into execution requests."""

from vizforge.compiler.execution_config import ExecutionConfigCompiler
from vizforge.errors import (
    CompilationError,
    MissingAttributeError,
    UnknownMetricStrategy,
    VizForgeError,
)
from vizforge.store import VisualizationStore

__all__ = [
    "CompilationError",
    "ExecutionConfigCompiler",
    "MissingAttributeError",
    "UnknownMetricStrategy",
    "VisualizationStore",
    "VizForgeError",
]
