"""Exceptions raised while compiling visualization metadata."""


class VizForgeError(Exception):
    """Base class for all vizforge errors."""


class CompilationError(VizForgeError):
    """A metadata object could not be compiled into an execution configuration."""


class UnknownMetricStrategy(CompilationError):
    """No registered rule matched a measure.

    this is a caller contract violation (malformed measure), never something
    to retry.
    """

    def __init__(self, measure: object) -> None:
        self.measure = measure
        title = getattr(measure, "title", None)
        uri = getattr(measure, "object_uri", None)
        super().__init__(f"Unknown metric strategy for measure '{title}' ({uri})")


class MissingAttributeError(CompilationError):
    """A generated metric needs an attribute the bucket doesn't provide."""
