"""
Query Domain

Query object normalization, SQL building and paginated execution.
"""

from sqleary.domain.query.spec import normalize_query_spec
from sqleary.domain.query.builder import ClauseBuilder
from sqleary.domain.query.engine import QueryEngine, build

__all__ = ["normalize_query_spec", "ClauseBuilder", "QueryEngine", "build"]
