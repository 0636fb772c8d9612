"""
Clause Builder

Renders a QuerySpec into a single SQL string, clause by clause, in the
fixed order SELECT, FROM, JOIN, WHERE, ORDER BY, LIMIT, OFFSET.

Values are interpolated into the SQL text as literals (strings in single
quotes, list members in double quotes, numbers bare). Nothing is bound
as a parameter, so the SQL must only be built from trusted query objects.

Usage:
    builder = ClauseBuilder()
    spec = normalize_query_spec({"table": "tracks", "page": 3})
    builder.build_sql(spec)
    # SELECT * FROM server_tracks LIMIT 100 OFFSET 200
"""

import logging
from typing import Any, List, Optional, Tuple

import sqlglot
from sqlglot.errors import ParseError

from sqleary.shared.exceptions import SQLBuilderError
from sqleary.shared.types.models import PRIMARY_ROW_ID_ALIAS, QuerySpec

logger = logging.getLogger(__name__)

COUNT_ALIAS = "numItems"
COUNT_PROJECTION = f"COUNT(*) AS {COUNT_ALIAS}"


class ClauseBuilder:
    """
    Stateless SQL clause generator.

    The dialect only decides which random() function `orderBy: "rand"`
    renders to and which sqlglot dialect validation uses.
    """

    # Map of engine names to SQLGlot dialects
    DIALECT_MAP = {
        "sqlite": "sqlite",
        "duckdb": "duckdb",
        "postgres": "postgres",
        "postgresql": "postgres",
        "mysql": "mysql",
        "mariadb": "mysql",
        "sqlserver": "tsql",
        "mssql": "tsql",
    }

    RANDOM_FUNCTIONS = {
        "mysql": "RAND()",
        "tsql": "NEWID()",
    }

    def __init__(self, dialect: str = "sqlite"):
        self.dialect = dialect.lower()
        self.target_dialect = self.DIALECT_MAP.get(self.dialect, "sqlite")

    # =========================================================================
    # Full statements
    # =========================================================================

    def build_sql(self, spec: QuerySpec) -> str:
        """Build the page query for the spec's current page."""
        clauses = [
            self.build_select_clause(spec),
            self.build_from_clause(spec),
            self.build_join_clause(spec),
            self.build_where_clause(spec),
            self.build_order_by_clause(spec),
            self.build_limit_clause(spec),
            self.build_offset_clause(spec),
        ]
        return " ".join(clause for clause in clauses if clause)

    def build_count_sql(self, spec: QuerySpec) -> str:
        """
        Build the COUNT variant of the page query.

        Same FROM, JOIN, WHERE and LIMIT as build_sql(), with the projection
        swapped for COUNT(*). OFFSET is dropped so the count spans the whole
        filtered set rather than one page; ORDER BY is dropped because
        engines such as DuckDB reject it next to a bare aggregate.
        """
        clauses = [
            f"SELECT {COUNT_PROJECTION}",
            self.build_from_clause(spec),
            self.build_join_clause(spec),
            self.build_where_clause(spec),
            self.build_limit_clause(spec),
        ]
        return " ".join(clause for clause in clauses if clause)

    # =========================================================================
    # Clauses
    # =========================================================================

    def build_select_clause(self, spec: QuerySpec) -> str:
        # keep the primary table id under its own name; the joined table's
        # id replaces it in "*"
        if spec.is_joined:
            return f"SELECT {spec.qualified_table}.id AS {PRIMARY_ROW_ID_ALIAS}, *"
        return "SELECT *"

    def build_from_clause(self, spec: QuerySpec) -> str:
        return f"FROM {spec.qualified_table}"

    def build_join_clause(self, spec: QuerySpec) -> str:
        """
        Build every JOIN block in the order given.

        Each `on` pair becomes its own ON line under the same JOIN.
        """
        parts: List[str] = []

        for join in spec.join:
            joined_table = f"{spec.prefix}{join.table}"
            parts.append(f"{join.type} {joined_table}")

            for primary_col, joined_col in join.on.items():
                parts.append(
                    f"ON {spec.qualified_table}.{primary_col} "
                    f"{join.equality_operator} "
                    f"{joined_table}.{joined_col}"
                )

        return " ".join(parts)

    def build_where_clause(self, spec: QuerySpec) -> str:
        predicates: List[str] = []

        for group in spec.columns:
            operator = group.equality_operator or spec.equality_operator

            for column, value in group.columns.items():
                # table.column names are already qualified, only prefix them
                if "." in column:
                    column = f"{spec.prefix}{column}"
                predicates.append(f"{column} {operator} {self._render_value(value)}")

        if not predicates:
            return ""

        return "WHERE " + f" {spec.column_compare} ".join(predicates)

    def build_order_by_clause(self, spec: QuerySpec) -> str:
        """
        Build the ORDER BY clause.

        Ordering is always case insensitive; otherwise sqlite sorts every
        uppercase value before every lowercase one ('blink-182' after 'Z').
        """
        if spec.order_by is None:
            return ""

        if spec.order_by == "rand":
            return f"ORDER BY {self.RANDOM_FUNCTIONS.get(self.target_dialect, 'RANDOM()')}"

        if not spec.order_by:
            return ""

        terms = [f"{term.column} COLLATE NOCASE {term.direction}" for term in spec.order_by]
        return "ORDER BY " + ", ".join(terms)

    def build_limit_clause(self, spec: QuerySpec) -> str:
        # showing all results
        if spec.is_unbounded:
            return ""
        return f"LIMIT {spec.items_per_page}"

    def build_offset_clause(self, spec: QuerySpec) -> str:
        # showing all results, or the first page
        if spec.is_unbounded or spec.page == 1:
            return ""
        return f"OFFSET {self.calculate_offset(spec)}"

    def calculate_offset(self, spec: QuerySpec) -> int:
        return (spec.page * spec.items_per_page) - spec.items_per_page

    def _render_value(self, value: Any) -> str:
        if isinstance(value, str):
            return f"'{value}'"

        if isinstance(value, list):
            # (1,2,3) or ("item a","item b")
            items = [f'"{item}"' if isinstance(item, str) else str(item) for item in value]
            return "(" + ",".join(items) + ")"

        return str(value)

    # =========================================================================
    # sqlglot helpers
    # =========================================================================

    def validate_sql(self, sql: str, dialect: Optional[str] = None) -> Tuple[bool, Optional[str]]:
        """
        Validate SQL syntax.

        Args:
            sql: SQL query to validate
            dialect: SQL dialect (defaults to target_dialect)

        Returns:
            Tuple of (is_valid, error_message)
        """
        dialect = self.DIALECT_MAP.get((dialect or self.dialect).lower(), self.target_dialect)

        try:
            sqlglot.parse_one(sql, read=dialect)
            return True, None
        except ParseError as e:
            return False, str(e)

    def convert_sql(self, sql: str, target_dialect: str) -> str:
        """
        Convert generated SQL to another dialect.

        Args:
            sql: SQL query in this builder's dialect
            target_dialect: Engine name (e.g. "postgres", "mysql")

        Returns:
            Converted SQL string
        """
        target = self.DIALECT_MAP.get(target_dialect.lower(), target_dialect)

        try:
            return sqlglot.transpile(sql, read=self.target_dialect, write=target)[0]
        except Exception as e:
            logger.error(f"SQL conversion failed: {e}")
            raise SQLBuilderError(f"Failed to convert SQL to {target_dialect}: {e}") from e
