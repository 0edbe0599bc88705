"""Custom exceptions for record transformation."""


class TransformerError(Exception):
    """Base exception for transformer errors."""

    pass


class UnsupportedTypeError(TransformerError, TypeError):
    """Raised when a transformer receives an object it cannot transform."""

    def __init__(self, object_type: type):
        message = (
            f"Unexpected object type encountered in transformer: "
            f"{object_type.__module__}.{object_type.__qualname__}"
        )
        super().__init__(message)
        self.object_type = object_type


class TransformerNotRegisteredError(TransformerError, LookupError):
    """Raised when no transformer is registered for a model type."""

    def __init__(self, model_type: type):
        message = f"No transformer registered for model '{model_type.__qualname__}'"
        super().__init__(message)
        self.model_type = model_type


class TransformDepthError(TransformerError):
    """Raised when related records are nested deeper than allowed."""

    def __init__(self, max_depth: int, model_type: type | None = None):
        message = f"Relation nesting exceeds maximum depth of {max_depth}"
        if model_type is not None:
            message += f" at '{model_type.__qualname__}'"
        super().__init__(message)
        self.max_depth = max_depth
        self.model_type = model_type
