"""
Query Object Normalization

Turns the loose, JSON-like query object callers write into a QuerySpec.

Accepted shorthand:
    {"table": "tracks", "join": {...}}          -> join wrapped in a list
    {"table": "tracks", "columns": {...}}       -> columns wrapped in a list
    {"orderBy": {"name": "ASC", "date": "DESC"}} -> ordered list of terms
    {"orderBy": [{"name": "ASC"}, {"date": "DESC"}]}

Both camelCase keys (itemsPerPage) and snake_case keys (items_per_page)
are accepted. Anything that cannot produce SQL raises QueryConfigError
here, before a builder or transport is ever involved.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from sqleary.shared.exceptions import QueryConfigError
from sqleary.shared.types.models import ColumnGroup, JoinSpec, OrderTerm, QuerySpec

logger = logging.getLogger(__name__)


def normalize_query_spec(query: Union[Mapping, QuerySpec]) -> QuerySpec:
    """
    Build a QuerySpec from a query object.

    Args:
        query: Query object mapping, or an existing QuerySpec (copied)

    Returns:
        A new QuerySpec; the caller's object is never mutated

    Raises:
        QueryConfigError: If the query object is not a mapping, has no
                          table, or contains values that cannot be rendered
    """
    if isinstance(query, QuerySpec):
        return query.model_copy(deep=True)

    if not isinstance(query, Mapping):
        raise QueryConfigError("Query requires a query object")

    if "table" not in query:
        raise QueryConfigError("Query requires a table key")

    data = dict(query)
    joins = _pop_either(data, "join")
    columns = _pop_either(data, "columns")
    order_by = _pop_either(data, "orderBy", "order_by")

    data["join"] = _normalize_joins(joins)
    data["columns"] = _normalize_columns(columns)
    data["order_by"] = _normalize_order_by(order_by)

    try:
        spec = QuerySpec.model_validate(data)
    except ValidationError as e:
        raise QueryConfigError(
            f"Invalid query object: {e}",
            details={"errors": e.errors(include_url=False)}
        ) from e

    logger.debug(f"Normalized query for table {spec.qualified_table}")
    return spec


def _pop_either(data: Dict[str, Any], *keys: str) -> Any:
    """Pop the first present key out of `data`, dropping the other spellings."""
    found = None
    for key in keys:
        if key in data:
            value = data.pop(key)
            if found is None:
                found = value
    return found


def _normalize_joins(joins: Any) -> List[JoinSpec]:
    if not joins:
        return []

    if isinstance(joins, Mapping):
        joins = [joins]
    elif not isinstance(joins, (list, tuple)):
        raise QueryConfigError("join must be an object or a list of objects")

    normalized = []
    for join in joins:
        if not isinstance(join, Mapping):
            raise QueryConfigError("join must be an object or a list of objects")

        # table and on are both required
        if "table" not in join:
            raise QueryConfigError('JOIN was given without the "table" key')
        if "on" not in join:
            raise QueryConfigError('JOIN was given without the "on" key')
        if not isinstance(join["on"], Mapping):
            raise QueryConfigError('JOIN "on" must map primary columns to joined columns')

        try:
            normalized.append(JoinSpec.model_validate(dict(join)))
        except ValidationError as e:
            raise QueryConfigError(
                f"Invalid join on table {join['table']}: {e}",
                details={"errors": e.errors(include_url=False)}
            ) from e

    return normalized


def _normalize_columns(columns: Any) -> List[ColumnGroup]:
    if not columns:
        return []

    if isinstance(columns, Mapping):
        columns = [columns]
    elif not isinstance(columns, (list, tuple)):
        raise QueryConfigError("columns must be an object or a list of objects")

    groups = []
    for group in columns:
        if not isinstance(group, Mapping):
            raise QueryConfigError("columns must be an object or a list of objects")

        values = dict(group)
        operator = values.pop("equalityOperator", None)

        for column, value in values.items():
            values[column] = _check_column_value(column, value)

        try:
            groups.append(ColumnGroup(columns=values, equality_operator=operator))
        except ValidationError as e:
            raise QueryConfigError(
                f"Invalid column group: {e}",
                details={"errors": e.errors(include_url=False)}
            ) from e

    return groups


def _is_scalar(value: Any) -> bool:
    # bool is an int subclass but has no literal form here
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def _check_column_value(column: str, value: Any) -> Any:
    if _is_scalar(value):
        return value

    if isinstance(value, (list, tuple)):
        for item in value:
            if not _is_scalar(item):
                raise QueryConfigError(
                    f"Column {column} list values must be strings or numbers, got {item!r}"
                )
        return list(value)

    raise QueryConfigError(
        f"Column {column} value must be a string, number or list, got {value!r}"
    )


def _normalize_order_by(order_by: Any) -> Optional[Union[str, List[OrderTerm]]]:
    if order_by is None:
        return None

    if isinstance(order_by, str):
        if order_by == "rand":
            return "rand"
        raise QueryConfigError(f"Unsupported orderBy value: {order_by!r}")

    if isinstance(order_by, Mapping):
        pairs = list(order_by.items())
    elif isinstance(order_by, (list, tuple)):
        pairs = []
        for entry in order_by:
            if not isinstance(entry, Mapping):
                raise QueryConfigError("orderBy list entries must be {column: order} objects")
            pairs.extend(entry.items())
    else:
        raise QueryConfigError("orderBy must be 'rand', an object, or a list of objects")

    if not pairs:
        return None

    terms = []
    for column, direction in pairs:
        direction = str(direction).upper()
        if direction not in ("ASC", "DESC"):
            raise QueryConfigError(f"orderBy direction for {column} must be ASC or DESC")
        terms.append(OrderTerm(column=column, direction=direction))
    return terms
