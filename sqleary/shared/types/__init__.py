"""
Shared Types

Query object models.
"""

from sqleary.shared.types.models import (
    QuerySpec,
    ColumnGroup,
    JoinSpec,
    OrderTerm,
    EqualityOperator,
    ColumnCompare,
    JoinType,
    OrderDirection,
    PRIMARY_ROW_ID_ALIAS
)

__all__ = [
    "QuerySpec",
    "ColumnGroup",
    "JoinSpec",
    "OrderTerm",
    "EqualityOperator",
    "ColumnCompare",
    "JoinType",
    "OrderDirection",
    "PRIMARY_ROW_ID_ALIAS"
]
