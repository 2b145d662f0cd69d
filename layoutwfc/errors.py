"""Exceptions raised by the layout generator.

Generation itself never raises: bounds problems are reported through return
values and contradictions are absorbed by the Floor fallback. These cover
misuse around it.
"""


class LayoutError(Exception):
    """Base class for layout generator errors."""

    pass


class InvalidConstraintsError(LayoutError, ValueError):
    """Raised when a layout record fails strict validation."""

    pass


class ReentrantGenerationError(LayoutError, RuntimeError):
    """Raised when a solver is re-entered from inside its own operation.

    Calls from other threads block on the solver's lock instead; this only
    fires for a call made on the thread that already holds it (for example
    from a collapse observer).
    """

    pass
