"""restform: shape ORM models and plain records into API responses."""

from restform.case import CaseType, format_case
from restform.config import Settings, get_settings
from restform.exceptions import (
    TransformDepthError,
    TransformerError,
    TransformerNotRegisteredError,
    UnsupportedTypeError,
)
from restform.models.base import Base, Pivot, RestfulModel, TimestampMixin
from restform.registry import TransformerRegistry
from restform.transformer import RestfulTransformer, format_date

__all__ = [
    "Base",
    "CaseType",
    "Pivot",
    "RestfulModel",
    "RestfulTransformer",
    "Settings",
    "TimestampMixin",
    "TransformDepthError",
    "TransformerError",
    "TransformerNotRegisteredError",
    "TransformerRegistry",
    "UnsupportedTypeError",
    "format_case",
    "format_date",
    "get_settings",
]
