"""Model base classes for restform."""

from restform.models.base import Base, Pivot, RestfulModel, TimestampMixin

__all__ = ["Base", "Pivot", "RestfulModel", "TimestampMixin"]
