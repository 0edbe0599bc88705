"""Transform models and plain records into JSON-ready API mappings."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timezone, tzinfo
from types import SimpleNamespace
from typing import Any

from restform.case import CaseType, format_case
from restform.config import get_settings
from restform.exceptions import TransformDepthError, TransformerError, UnsupportedTypeError
from restform.models.base import Pivot, RestfulModel
from restform.registry import TransformerRegistry

logger = logging.getLogger(__name__)

PRIMARY_KEY = "id"
PIVOT_KEY = "pivot"


@dataclass(frozen=True)
class TransformContext:
    """Position of a record within one transform call.

    ``max_depth`` is fixed by the transformer that starts the call and applies
    to every related record, whichever transformer handles it.
    """

    max_depth: int
    depth: int = 0
    path: frozenset[tuple[type, Any]] = frozenset()

    def enter(self, identity: tuple[type, Any]) -> "TransformContext":
        return replace(self, path=self.path | {identity})

    def descend(self) -> "TransformContext":
        return replace(self, depth=self.depth + 1)


def _identity(model: RestfulModel) -> tuple[type, Any]:
    key = model.get_key()
    # Unsaved records have no key yet; fall back to object identity
    return (type(model), key if key is not None else id(model))


def format_date(value: Any, default_tz: tzinfo = timezone.utc) -> str:
    """
    Render a date-like value as an ISO-8601 string with a UTC offset.

    Args:
        value: datetime, date, ISO-8601 string or POSIX timestamp
        default_tz: Timezone assumed for naive values

    Returns:
        Timestamp such as ``2021-05-01T12:00:00+00:00``
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        value = datetime.fromtimestamp(value, tz=timezone.utc).astimezone(default_tz)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=default_tz)
    elif isinstance(value, date):
        value = datetime.combine(value, time(), tzinfo=default_tz)
    else:
        raise TransformerError(f"Cannot format {type(value).__qualname__} as a date")

    return value.isoformat(timespec="seconds")


class RestfulTransformer:
    """
    Transformer turning records into plain mappings for API responses.

    Models (RestfulModel instances) are filtered through their allow-list,
    get their dates rendered as ISO-8601, expose their primary key as ``id``
    and carry their loaded relations, each transformed by the transformer
    registered for the related model. Plain records (mappings and
    SimpleNamespace objects) only have their keys re-cased.

    Subclass and register per model type to customise the output.
    """

    def __init__(
        self,
        registry: TransformerRegistry | None = None,
        case_type: CaseType | None = None,
        max_depth: int | None = None,
        naive_timezone: tzinfo | None = None,
    ):
        """
        Initialize a transformer.

        Args:
            registry: Registry used to find transformers of related models.
                      If None, related models are transformed by this instance.
            case_type: Key casing of the output. If None, uses settings.
            max_depth: Maximum relation nesting. If None, uses settings.
            naive_timezone: Timezone assumed for naive datetimes. If None, uses settings.
        """
        settings = get_settings()

        if registry is None:
            registry = TransformerRegistry(default=self)

        if case_type is None:
            case_type = settings.response_case_type

        if max_depth is None:
            max_depth = settings.max_depth

        if naive_timezone is None:
            naive_timezone = settings.get_timezone()

        self.registry = registry
        self.case_type = CaseType(case_type)
        self.max_depth = max_depth
        self.naive_timezone = naive_timezone

    def transform(self, record: Any, context: TransformContext | None = None) -> dict[str, Any]:
        """
        Transform a record into a JSON-ready mapping.

        Args:
            record: RestfulModel instance, mapping or SimpleNamespace
            context: Traversal state when called for a related record

        Returns:
            New mapping with formatted keys

        Raises:
            UnsupportedTypeError: If the record is of any other type
        """
        if isinstance(record, RestfulModel):
            return self.transform_model(record, context)

        if isinstance(record, (Mapping, SimpleNamespace)):
            return self.transform_generic(record)

        raise UnsupportedTypeError(type(record))

    def transform_generic(self, record: Mapping[str, Any] | SimpleNamespace) -> dict[str, Any]:
        """Transform a plain record, re-casing keys at every depth."""
        if isinstance(record, SimpleNamespace):
            record = vars(record)
        return format_case(dict(record), self.case_type)

    def transform_model(
        self, model: RestfulModel, context: TransformContext | None = None
    ) -> dict[str, Any]:
        """
        Transform a model into a mapping.

        Args:
            model: Model instance with its relations already loaded
            context: Traversal state when called for a related record

        Returns:
            Mapping with ``id`` first, allowed attributes, then relations
        """
        if context is None:
            context = TransformContext(max_depth=self.max_depth)
        if context.depth > context.max_depth:
            raise TransformDepthError(context.max_depth, type(model))
        context = context.enter(_identity(model))

        attributes = model.get_attributes()

        # Filter out attributes we don't want to expose to the API
        filtered_out = self.get_filtered_out_attributes(model, attributes)
        transformed = {
            key: value for key, value in attributes.items() if key not in filtered_out
        }

        for date_column in model.get_dates():
            if date_column in filtered_out or date_column not in model.allowed_fields:
                continue
            value = model.get_attribute(date_column)
            if value:
                transformed[date_column] = format_date(value, self.naive_timezone)

        # Every primary key is exposed as "id"
        key_name = model.get_key_name()
        transformed = {
            PRIMARY_KEY: model.get_key(),
            **{
                key: value
                for key, value in transformed.items()
                if key not in (key_name, PRIMARY_KEY)
            },
        }

        transformed = format_case(transformed, self.case_type)

        return self.transform_relations(model, transformed, context)

    def get_filtered_out_attributes(
        self, model: RestfulModel, attributes: Mapping[str, Any] | None = None
    ) -> set[str]:
        """
        Get the attributes never exposed to an API consumer.

        Override to hide more (or fewer) attributes than the model's
        allow-list does.

        Returns:
            Names of present attributes missing from ``allowed_fields``
        """
        if attributes is None:
            attributes = model.get_attributes()
        return set(attributes) - set(model.allowed_fields)

    def transform_relations(
        self,
        model: RestfulModel,
        transformed: dict[str, Any],
        context: TransformContext | None = None,
    ) -> dict[str, Any]:
        """
        Add the model's loaded relations to its transformed mapping.

        Empty collections and missing related records are left out, as are
        pivot (join table) records and records already being transformed
        further up the current branch.
        """
        if context is None:
            context = TransformContext(max_depth=self.max_depth).enter(_identity(model))
        child_context = context.descend()

        for relation_key, relation in model.get_relations().items():
            if isinstance(relation, Pivot):
                continue

            if isinstance(relation, (list, tuple)):
                if not relation:
                    continue
                if any(isinstance(member, Pivot) for member in relation):
                    continue

                relation_transformer = self.registry.get(type(relation[0]))
                items = []
                for related_model in relation:
                    if self._on_path(related_model, context, relation_key):
                        continue
                    item = relation_transformer.transform(related_model, child_context)
                    # Pivot information is not part of the related record
                    item.pop(PIVOT_KEY, None)
                    items.append(item)

                if items:
                    transformed[format_case(relation_key, self.case_type)] = items

            elif isinstance(relation, RestfulModel):
                if self._on_path(relation, context, relation_key):
                    continue
                relation_transformer = self.registry.get(type(relation))
                transformed[format_case(relation_key, self.case_type)] = (
                    relation_transformer.transform(relation, child_context)
                )

            elif relation is not None:
                logger.debug(
                    f"Ignoring relation {relation_key!r} of {type(model).__qualname__}: "
                    f"unsupported value {type(relation).__qualname__}"
                )

        return transformed

    def _on_path(self, related: Any, context: TransformContext, relation_key: str) -> bool:
        if not isinstance(related, RestfulModel) or _identity(related) not in context.path:
            return False
        logger.debug(
            f"Not descending into {relation_key!r}: {type(related).__qualname__} "
            f"{related.get_key()!r} is already being transformed"
        )
        return True
