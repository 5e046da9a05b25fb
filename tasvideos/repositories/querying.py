"""
Generic helpers for list endpoints: sort parsing and validation against a
response schema, ORDER BY / OFFSET / LIMIT composition, and field selection
over serialized records.

Sort strings are comma-separated field names. A leading ``-`` sorts that field
descending; a leading ``+`` (or no prefix) sorts ascending. Names are matched
case-insensitively against both the schema field names and their aliases.
"""
from __future__ import annotations

import types
import typing
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel
from sqlalchemy import Select
from sqlalchemy.sql.elements import ColumnElement


@dataclass(frozen=True)
class SortField:
    """A single ORDER BY term requested by a client."""
    name: str
    descending: bool = False


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated parameter, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


# PUBLIC_INTERFACE
def parse_sort(sort: Optional[str]) -> List[SortField]:
    """Parse a sort string such as ``"-frames,title"`` into SortField terms."""
    terms: List[SortField] = []
    for token in split_csv(sort):
        descending = token.startswith("-")
        name = token.lstrip("+-").strip()
        terms.append(SortField(name=name, descending=descending))
    return terms


def _is_scalar(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        return all(_is_scalar(a) for a in args)
    return origin not in (list, List, set, tuple, dict)


# PUBLIC_INTERFACE
def sortable_fields(model: type[BaseModel]) -> dict[str, str]:
    """
    Map lowercased field names and aliases of ``model`` to canonical field names.

    Only scalar fields are sortable; list-valued fields are excluded.
    """
    names: dict[str, str] = {}
    for field_name, info in model.model_fields.items():
        if not _is_scalar(info.annotation):
            continue
        names[field_name.lower()] = field_name
        if info.alias:
            names[info.alias.lower()] = field_name
    return names


# PUBLIC_INTERFACE
def invalid_sort_fields(sort: Optional[str], model: type[BaseModel]) -> List[str]:
    """Return the requested sort field names that ``model`` cannot be sorted by."""
    allowed = sortable_fields(model)
    return [term.name for term in parse_sort(sort) if term.name.lower() not in allowed]


# PUBLIC_INTERFACE
def is_valid_sort(sort: Optional[str], model: type[BaseModel]) -> bool:
    """True when every field in ``sort`` is a sortable field of ``model``. An empty sort is valid."""
    return not invalid_sort_fields(sort, model)


# PUBLIC_INTERFACE
def resolve_sort(sort: Optional[str], model: type[BaseModel]) -> List[SortField]:
    """
    Parse ``sort`` and rewrite each term to its canonical field name on ``model``.

    Raises:
        ValueError: if any term is not sortable; call is_valid_sort first.
    """
    allowed = sortable_fields(model)
    resolved: List[SortField] = []
    for term in parse_sort(sort):
        canonical = allowed.get(term.name.lower())
        if canonical is None:
            raise ValueError(f"Invalid sort field: {term.name}")
        resolved.append(SortField(name=canonical, descending=term.descending))
    return resolved


# PUBLIC_INTERFACE
def apply_sort(
    stmt: Select,
    terms: Sequence[SortField],
    columns: Mapping[str, ColumnElement],
    tiebreaker: Optional[str] = "id",
) -> Select:
    """
    Append ORDER BY clauses for ``terms`` using ``columns`` to map field names to SQL expressions.

    NULLs sort as the largest value on every backend: last when ascending,
    first when descending. The ``tiebreaker`` field is appended ascending
    unless already present, which keeps paging stable.
    """
    clauses = []
    seen = set()
    for term in terms:
        column = columns[term.name]
        clauses.append(column.desc().nulls_first() if term.descending else column.asc().nulls_last())
        seen.add(term.name)
    if tiebreaker and tiebreaker not in seen:
        clauses.append(columns[tiebreaker].asc())
    return stmt.order_by(*clauses)


# PUBLIC_INTERFACE
def paginate(stmt: Select, limit: int, offset: int) -> Select:
    """Apply OFFSET/LIMIT to a statement."""
    return stmt.offset(offset).limit(limit)


# PUBLIC_INTERFACE
def select_fields(records: Iterable[Mapping[str, Any]], fields: Optional[str]) -> List[dict[str, Any]]:
    """
    Keep only the requested keys of each record.

    Field names are matched case-insensitively; unknown names are ignored.
    With no fields requested the records are returned whole.
    """
    wanted = {name.lower() for name in split_csv(fields)}
    if not wanted:
        return [dict(r) for r in records]
    return [{k: v for k, v in r.items() if k.lower() in wanted} for r in records]
