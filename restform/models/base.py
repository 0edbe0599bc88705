"""Declarative base and mixins for models exposed through the API."""

from datetime import datetime, timezone
from typing import Any, ClassVar

from sqlalchemy import Date, DateTime, TypeDecorator, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from restform.exceptions import TransformerError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_date_type(type_: Any) -> bool:
    while isinstance(type_, TypeDecorator):
        type_ = type_.impl
    return isinstance(type_, (Date, DateTime))


class Base(DeclarativeBase):
    """Declarative base for restform-aware models."""

    pass


class TimestampMixin:
    """Adds created_at / updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class RestfulModel:
    """
    Mixin giving a mapped class the capabilities the transformer relies on.

    Only attributes and relationships already present on the instance are
    reported; nothing here triggers a lazy load.

    Class attributes:
        allowed_fields: Attribute names that may be exposed to API consumers.
                        The primary key is always exposed as ``id``.
        dates: Extra attribute names to render as ISO-8601 timestamps, on top
               of every Date/DateTime column.
    """

    allowed_fields: ClassVar[tuple[str, ...]] = ()
    dates: ClassVar[tuple[str, ...]] = ()

    def get_key_name(self) -> str:
        """Get the attribute name of the primary key."""
        mapper = inspect(self).mapper
        if len(mapper.primary_key) != 1:
            raise TransformerError(
                f"{type(self).__qualname__} has a composite primary key, "
                "which cannot be exposed as a single id"
            )
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    def get_key(self) -> Any:
        """Get the primary key value."""
        return getattr(self, self.get_key_name())

    def get_attributes(self) -> dict[str, Any]:
        """
        Get the loaded column attributes of this instance.

        Returns:
            Mapping of attribute name to raw value, in mapper order
        """
        state = inspect(self)
        unloaded = state.unloaded
        return {
            attr.key: state.dict.get(attr.key)
            for attr in state.mapper.column_attrs
            if attr.key not in unloaded
        }

    def get_attribute(self, name: str) -> Any:
        """Get one attribute without loading it; unloaded columns read as None."""
        state = inspect(self)
        if name in state.mapper.attrs:
            return state.dict.get(name)
        return getattr(self, name, None)

    @classmethod
    def get_dates(cls) -> list[str]:
        """
        Get the names of all date-valued attributes.

        Date and DateTime columns are found automatically, including
        TypeDecorator columns built on them; list any other date-valued
        attribute in ``dates``.
        """
        mapper = inspect(cls)
        names = [
            attr.key
            for attr in mapper.column_attrs
            if _is_date_type(attr.columns[0].type)
        ]
        names.extend(name for name in cls.dates if name not in names)
        return names

    def get_relations(self) -> dict[str, Any]:
        """
        Get the loaded relationships of this instance.

        Returns:
            Mapping of relationship name to a related instance, a list of
            related instances, or None
        """
        state = inspect(self)
        unloaded = state.unloaded
        return {
            rel.key: state.dict.get(rel.key)
            for rel in state.mapper.relationships
            if rel.key not in unloaded
        }


class Pivot:
    """
    Marks an association object mapped onto a join table.

    Pivot rows carry join metadata only and are never rendered.
    """

    pass
