"""Resolving links inside a schema, filtering tables and cloning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .jsonio import schema_from_dict, schema_to_dict
from .model import Labels, NotFoundError, Schema, Table, match_simple

__all__ = [
    "FilterOption",
    "separate_tables",
    "filter_schema",
    "repair",
    "clone",
    "clone_without_viewpoints",
]


@dataclass
class FilterOption:
    """Which tables to keep: by name pattern, by label, and how far to follow relations."""

    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    include_labels: list[str] = field(default_factory=list)
    distance: int = 0


def _match_length(patterns: list[str], name: str) -> Optional[int]:
    """Length of the first matching pattern without wildcards, or None."""
    for pattern in patterns:
        if match_simple(pattern, name):
            return len(pattern.replace("*", ""))
    return None


def _match_labels(patterns: list[str], labels: Labels) -> bool:
    return any(match_simple(pattern, label.name) for label in labels for pattern in patterns)


def _match_table_or_column_labels(patterns: list[str], table: Table) -> bool:
    if _match_labels(patterns, table.labels):
        return True
    return any(_match_labels(patterns, column.labels) for column in table.columns)


def separate_tables(schema: Schema, option: FilterOption) -> tuple[list[Table], list[Table]]:
    """Split the schema's tables into those the option keeps and the rest."""
    include = [*option.include, *schema.normalize_table_names(option.include)]
    exclude = [*option.exclude, *schema.normalize_table_names(option.exclude)]

    includes: list[Table] = []
    excludes: list[Table] = []
    for table in schema.tables:
        include_length = _match_length(include, table.name)
        exclude_length = _match_length(exclude, table.name)
        excluded = exclude_length is not None
        if include_length is not None:
            keep = not (excluded and include_length < exclude_length)
        elif _match_table_or_column_labels(option.include_labels, table):
            keep = not excluded
        elif not option.include and not option.include_labels:
            keep = not excluded
        else:
            keep = False
        (includes if keep else excludes).append(table)

    include_names = {table.name for table in includes}
    expanded: list[Table] = []
    expanded_names: set[str] = set()
    for table in includes:
        expanded.append(table)
        expanded_names.add(table.name)
        related, _ = table.collect_tables_and_relations(option.distance, True)
        for other in related:
            if other.name not in include_names and other.name not in expanded_names:
                expanded.append(other)
                expanded_names.add(other.name)

    remaining = [table for table in excludes if table.name not in expanded_names]

    if len(schema.tables) != len(expanded) + len(remaining):
        raise ValueError(
            "failed to separate tables. expected: "
            f"{len(schema.tables)}, actual: {len(expanded) + len(remaining)}"
        )
    return expanded, remaining


def _exclude_table(schema: Schema, name: str) -> None:
    def keeps(relation) -> bool:
        return relation.table.name != name and relation.parent_table.name != name

    for table in schema.tables:
        for column in table.columns:
            column.child_relations = [r for r in column.child_relations if keeps(r)]
            column.parent_relations = [r for r in column.parent_relations if keeps(r)]
    schema.tables = [table for table in schema.tables if table.name != name]
    schema.relations = [r for r in schema.relations if keeps(r)]


def filter_schema(schema: Schema, option: FilterOption) -> None:
    """Remove from the schema, in place, every table the option does not keep."""
    _, excludes = separate_tables(schema, option)
    for table in excludes:
        _exclude_table(schema, table.name)


def _wrapped(prefix: str, exc: Exception) -> Exception:
    message = f"{prefix}: {exc}"
    if isinstance(exc, NotFoundError):
        return NotFoundError(message)
    return ValueError(message)


def _repair_without_viewpoints(schema: Schema) -> None:
    for table in schema.tables:
        resolved = []
        for referenced in table.referenced_tables:
            try:
                resolved.append(schema.find_table_by_name(referenced.name))
            except NotFoundError:
                referenced.external = True
                resolved.append(referenced)
        table.referenced_tables = resolved

    for relation in schema.relations:
        try:
            table = schema.find_table_by_name(relation.table.name)
            columns = []
            for placeholder in relation.columns:
                column = table.find_column_by_name(placeholder.name)
                column.parent_relations.append(relation)
                columns.append(column)
            relation.columns = columns
            relation.table = table

            parent_table = schema.find_table_by_name(relation.parent_table.name)
            parent_columns = []
            for placeholder in relation.parent_columns:
                column = parent_table.find_column_by_name(placeholder.name)
                column.child_relations.append(relation)
                parent_columns.append(column)
            relation.parent_columns = parent_columns
            relation.parent_table = parent_table
        except NotFoundError as exc:
            raise _wrapped("failed to repair relation", exc) from exc


def repair(schema: Schema) -> None:
    """Link relations, columns and referenced tables; build viewpoint schemas."""
    _repair_without_viewpoints(schema)
    # Viewpoints are built from a schema that is as complete as possible.
    for viewpoint in schema.viewpoints:
        try:
            copy = clone_without_viewpoints(schema)
            filter_schema(
                copy,
                FilterOption(
                    include=list(viewpoint.tables or []),
                    include_labels=list(viewpoint.labels or []),
                    distance=viewpoint.distance,
                ),
            )
        except (LookupError, ValueError) as exc:
            raise _wrapped("failed to repair viewpoint", exc) from exc
        viewpoint.schema = copy


def clone(schema: Schema) -> Schema:
    """Return a repaired deep copy of the schema through its JSON form."""
    copy = schema_from_dict(schema_to_dict(schema))
    repair(copy)
    return copy


def clone_without_viewpoints(schema: Schema) -> Schema:
    """Return a deep copy whose links are repaired but viewpoints left unbuilt."""
    copy = schema_from_dict(schema_to_dict(schema))
    _repair_without_viewpoints(copy)
    return copy