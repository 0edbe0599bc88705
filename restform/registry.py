"""Explicit mapping from model types to their transformers."""

import logging
from typing import TYPE_CHECKING, Callable, TypeVar

from restform.exceptions import TransformerNotRegisteredError

if TYPE_CHECKING:
    from restform.transformer import RestfulTransformer

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=type)


class TransformerRegistry:
    """
    Registry of the transformer used for each model type.

    Build it once at process start. Lookups walk the model's MRO, so a
    subclass uses its parent's transformer unless it registers its own.
    """

    def __init__(self, default: "RestfulTransformer | None" = None):
        """
        Initialize an empty registry.

        Args:
            default: Transformer returned for unregistered model types.
                     If None, lookups for unregistered types raise.
        """
        self.default = default
        self._transformers: dict[type, "RestfulTransformer"] = {}

    def register(self, model_cls: type, transformer: "RestfulTransformer") -> None:
        """Register the transformer for a model type, replacing any existing one."""
        if model_cls in self._transformers:
            logger.debug(f"Replacing transformer for {model_cls.__qualname__}")
        self._transformers[model_cls] = transformer

    def unregister(self, model_cls: type) -> None:
        """Remove the transformer registered for a model type."""
        self._transformers.pop(model_cls, None)

    def transformer_for(self, transformer: "RestfulTransformer") -> Callable[[ModelT], ModelT]:
        """
        Class decorator registering a transformer for the decorated model.

        Usage:
            @registry.transformer_for(UserTransformer())
            class User(Base, RestfulModel):
                ...
        """

        def decorator(model_cls: ModelT) -> ModelT:
            self.register(model_cls, transformer)
            return model_cls

        return decorator

    def get(self, model_cls: type) -> "RestfulTransformer":
        """
        Get the transformer for a model type.

        Args:
            model_cls: Concrete model type

        Returns:
            The registered transformer, or the default one

        Raises:
            TransformerNotRegisteredError: If nothing is registered and there
                                           is no default
        """
        for klass in model_cls.__mro__:
            transformer = self._transformers.get(klass)
            if transformer is not None:
                return transformer
        if self.default is not None:
            return self.default
        raise TransformerNotRegisteredError(model_cls)

    def __contains__(self, model_cls: type) -> bool:
        return any(klass in self._transformers for klass in model_cls.__mro__)

    def __len__(self) -> int:
        return len(self._transformers)
