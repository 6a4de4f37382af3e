"""
SQL statement construction.

Filter values never enter statement text: only ``@name`` placeholders are
written into the template, and the values travel in the parameter mapping.
``passthrough`` is the exception: the ``execute_query`` tool hands over the
caller's statement verbatim and the caller owns its safety.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Set

TABLES_BASE_QUERY = "SELECT * FROM INFORMATION_SCHEMA.TABLES"

# (argument name, INFORMATION_SCHEMA.TABLES column) in predicate order
TABLE_FILTERS = (
    ("catalogName", "TABLE_CATALOG"),
    ("schemaName", "TABLE_SCHEMA"),
    ("tableName", "TABLE_NAME"),
)

_PLACEHOLDER_RE = re.compile(r"@([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class QuerySpec:
    """A statement template and the values bound to its placeholders."""
    statement: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def placeholders(self) -> Set[str]:
        """Names of the ``@name`` placeholders in the statement."""
        return set(_PLACEHOLDER_RE.findall(self.statement))


def build_list_query(filters: Optional[Mapping[str, Any]] = None) -> QuerySpec:
    """
    Build the ``list_tables`` statement against INFORMATION_SCHEMA.TABLES.

    Args:
        filters: Validated ``catalogName``/``schemaName``/``tableName`` values.
            Missing, ``None`` and empty values are skipped.

    Returns:
        QuerySpec with one equality predicate per supplied filter, in
        catalog, schema, table order
    """
    filters = filters or {}
    predicates = []
    parameters: Dict[str, Any] = {}

    for name, column in TABLE_FILTERS:
        value = filters.get(name)
        if value is None or value == "":
            continue
        predicates.append(f"{column} = @{name}")
        parameters[name] = value

    statement = TABLES_BASE_QUERY
    if predicates:
        statement += " WHERE " + " AND ".join(predicates)

    return QuerySpec(statement=statement, parameters=parameters)


def passthrough(statement: str) -> QuerySpec:
    """Wrap a caller-supplied statement without inspecting or altering it."""
    return QuerySpec(statement=statement, parameters={})
