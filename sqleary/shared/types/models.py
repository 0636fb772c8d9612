from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

EqualityOperator = Literal["=", "LIKE", "IN", "NOT IN"]
ColumnCompare = Literal["AND", "OR"]
JoinType = Literal["LEFT JOIN", "INNER JOIN", "CROSS JOIN"]
OrderDirection = Literal["ASC", "DESC"]

# Selected next to "*" whenever a join is present; copied back onto "id"
# after execution because the joined table's id overwrites the primary one.
PRIMARY_ROW_ID_ALIAS = "_primaryTableRowId"


class ColumnGroup(BaseModel):
    """
    One mapping of column -> value pairs from the query object.

    The optional per-group equalityOperator is metadata, so it lives on
    its own attribute instead of inside `columns`.
    """
    model_config = ConfigDict(populate_by_name=True)

    columns: Dict[str, Any] = {}
    equality_operator: Optional[EqualityOperator] = Field(default=None, alias="equalityOperator")


class JoinSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    table: str = Field(min_length=1)
    on: Dict[str, str]                    # primary column -> joined column
    equality_operator: EqualityOperator = Field(default="=", alias="equalityOperator")
    type: JoinType = "LEFT JOIN"


class OrderTerm(BaseModel):
    column: str
    direction: OrderDirection = "ASC"


class QuerySpec(BaseModel):
    """
    Normalized description of one query.

    Build it through normalize_query_spec(), which accepts the loose
    JSON-like query object (single join / single column group shorthand,
    camelCase keys) and always produces list forms.

    PAGING:
    - itemsPerPage = -1 drops LIMIT and OFFSET; everything lands on page 1
    - page is 1-based
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    table: str = Field(min_length=1)
    prefix: str = "server_"
    columns: List[ColumnGroup] = []
    column_compare: ColumnCompare = Field(default="AND", alias="columnCompare")
    equality_operator: EqualityOperator = Field(default="=", alias="equalityOperator")
    order_by: Optional[Union[Literal["rand"], List[OrderTerm]]] = Field(default=None, alias="orderBy")
    join: List[JoinSpec] = []
    items_per_page: int = Field(default=100, alias="itemsPerPage")
    page: int = Field(default=1, ge=1)
    mode: Optional[str] = None

    @field_validator("items_per_page")
    @classmethod
    def _check_items_per_page(cls, value: int) -> int:
        if value == -1 or value >= 1:
            return value
        raise ValueError("itemsPerPage must be -1 or a positive integer")

    @property
    def qualified_table(self) -> str:
        """Table name with the prefix applied."""
        return f"{self.prefix}{self.table}"

    @property
    def is_joined(self) -> bool:
        return bool(self.join)

    @property
    def is_unbounded(self) -> bool:
        return self.items_per_page == -1
