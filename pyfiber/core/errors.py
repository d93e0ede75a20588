class ReconcilerError(Exception):
    """Base class for every error raised by the reconciler."""


class ConfigurationError(ReconcilerError):
    """The adapter or the settings cannot support what is being rendered."""


class HookOrderViolation(ReconcilerError):
    """Hooks were called in a different order or count than on the previous render."""

    def __init__(self, message, *, fiber=None, index=None):
        super().__init__(message)
        self.fiber = fiber
        self.index = index


class HookCallError(ReconcilerError, RuntimeError):
    """A hook was used while no component is being evaluated."""


class ReentrantTraversalError(ReconcilerError):
    """A render cycle was requested while another one is traversing or committing."""


class CommitError(ReconcilerError):
    """An adapter operation failed mid-commit. The host target is inconsistent."""


class RerenderLimitError(ReconcilerError):
    """Too many render cycles were drained from the queue in one flush."""
