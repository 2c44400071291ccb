"""YAML representation of a schema and conversion to and from it."""

from __future__ import annotations

from typing import Any, Optional

import yaml

from .cardinality import to_cardinality
from .model import (
    Column,
    Constraint,
    Driver,
    DriverMeta,
    Enum,
    Function,
    Index,
    Label,
    Labels,
    Relation,
    Schema,
    Table,
    Trigger,
    Viewpoint,
    ViewpointGroup,
    Viewpoints,
)

__all__ = [
    "schema_to_yaml_dict",
    "table_to_yaml_dict",
    "column_to_yaml_dict",
    "relation_to_yaml_dict",
    "schema_from_yaml_dict",
    "table_from_yaml_dict",
    "column_from_yaml_dict",
    "relation_from_yaml_dict",
    "dumps",
    "loads",
]


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` only when ``value`` is not empty."""
    if value:
        data[key] = value


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _strings(data: dict[str, Any], key: str) -> list[str]:
    return [str(item) for item in data.get(key) or []]


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a mapping")
    return value


# --- encoding -------------------------------------------------------------


def _labels_to_list(labels) -> list[dict[str, Any]]:
    items = []
    for label in labels or []:
        item: dict[str, Any] = {"name": label.name}
        _put(item, "virtual", bool(label.virtual))
        items.append(item)
    return items


def _index_to_dict(index: Index) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": index.name,
        "def": index.definition,
        "table": index.table,
        "columns": list(index.columns or []),
    }
    _put(data, "comment", index.comment)
    return data


def _constraint_to_dict(constraint: Constraint) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": constraint.name,
        "type": constraint.type,
        "def": constraint.definition,
        "table": constraint.table,
    }
    if constraint.referenced_table is not None:
        data["referencedTable"] = constraint.referenced_table
    _put(data, "columns", list(constraint.columns or []))
    _put(data, "referencedColumns", list(constraint.referenced_columns or []))
    _put(data, "comment", constraint.comment)
    return data


def _trigger_to_dict(trigger: Trigger) -> dict[str, Any]:
    data: dict[str, Any] = {"name": trigger.name, "def": trigger.definition}
    _put(data, "comment", trigger.comment)
    return data


def _function_to_dict(function: Function) -> dict[str, Any]:
    return {
        "name": function.name,
        "returnType": function.return_type,
        "arguments": function.arguments,
        "type": function.type,
    }


def _enum_to_dict(enum: Enum) -> dict[str, Any]:
    return {"name": enum.name, "values": list(enum.values or [])}


def _group_to_dict(group: ViewpointGroup) -> dict[str, Any]:
    data: dict[str, Any] = {"name": group.name, "desc": group.desc}
    _put(data, "labels", list(group.labels or []))
    _put(data, "tables", list(group.tables or []))
    _put(data, "color", group.color)
    return data


def _viewpoint_to_dict(viewpoint: Viewpoint) -> dict[str, Any]:
    data: dict[str, Any] = {"name": viewpoint.name, "desc": viewpoint.desc}
    _put(data, "labels", list(viewpoint.labels or []))
    _put(data, "tables", list(viewpoint.tables or []))
    _put(data, "distance", int(viewpoint.distance))
    _put(data, "groups", [_group_to_dict(g) for g in viewpoint.groups or []])
    return data


def _driver_to_dict(driver: Driver) -> dict[str, Any]:
    data: dict[str, Any] = {"name": driver.name}
    _put(data, "databaseVersion", driver.database_version)
    if driver.meta is not None:
        meta: dict[str, Any] = {}
        _put(meta, "currentSchema", driver.meta.current_schema)
        _put(meta, "searchPaths", list(driver.meta.search_paths or []))
        if driver.meta.dictionary:
            meta["dict"] = dict(sorted(driver.meta.dictionary.items()))
        data["meta"] = meta
    return data


def column_to_yaml_dict(column: Column) -> dict[str, Any]:
    """Return the YAML mapping of a column."""
    data: dict[str, Any] = {
        "name": column.name,
        "type": column.type,
        "nullable": bool(column.nullable),
    }
    if column.default is not None:
        data["default"] = column.default
    _put(data, "extraDef", column.extra_def)
    _put(data, "labels", _labels_to_list(column.labels))
    _put(data, "comment", column.comment)
    return data


def table_to_yaml_dict(table: Table) -> dict[str, Any]:
    """Return the YAML mapping of a table."""
    data: dict[str, Any] = {"name": table.name, "type": table.type}
    _put(data, "comment", table.comment)
    data["columns"] = [column_to_yaml_dict(c) for c in table.columns]
    _put(data, "indexes", [_index_to_dict(i) for i in table.indexes])
    _put(data, "constraints", [_constraint_to_dict(c) for c in table.constraints])
    _put(data, "triggers", [_trigger_to_dict(t) for t in table.triggers])
    _put(data, "def", table.definition)
    _put(data, "labels", _labels_to_list(table.labels))
    _put(data, "referencedTables", [t.name for t in table.referenced_tables])
    return data


def relation_to_yaml_dict(relation: Relation) -> dict[str, Any]:
    """Return the YAML mapping of a relation, naming tables and columns."""
    data: dict[str, Any] = {
        "table": relation.table.name,
        "columns": [c.name for c in relation.columns],
    }
    _put(data, "cardinality", relation.cardinality.value)
    data["parentTable"] = relation.parent_table.name
    data["parentColumns"] = [c.name for c in relation.parent_columns]
    _put(data, "parentCardinality", relation.parent_cardinality.value)
    data["def"] = relation.definition
    data["virtual"] = bool(relation.virtual)
    return data


def schema_to_yaml_dict(schema: Schema) -> dict[str, Any]:
    """Return the YAML mapping of a whole schema."""
    data: dict[str, Any] = {}
    _put(data, "name", schema.name)
    _put(data, "desc", schema.desc)
    data["tables"] = [table_to_yaml_dict(t) for t in schema.tables]
    _put(data, "relations", [relation_to_yaml_dict(r) for r in schema.relations])
    _put(data, "functions", [_function_to_dict(f) for f in schema.functions])
    _put(data, "enums", [_enum_to_dict(e) for e in schema.enums])
    if schema.driver is not None:
        data["driver"] = _driver_to_dict(schema.driver)
    _put(data, "labels", _labels_to_list(schema.labels))
    _put(data, "viewpoints", [_viewpoint_to_dict(v) for v in schema.viewpoints])
    return data


# --- decoding -------------------------------------------------------------


def _labels_from_list(items) -> Labels:
    return Labels(
        Label(name=_text(item, "name"), virtual=bool(item.get("virtual", False)))
        for item in items or []
    )


def _optional_text(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None else str(value)


def _index_from_dict(data: dict[str, Any]) -> Index:
    return Index(
        name=_text(data, "name"),
        definition=_text(data, "def"),
        table=_optional_text(data, "table"),
        columns=_strings(data, "columns"),
        comment=_text(data, "comment"),
    )


def _constraint_from_dict(data: dict[str, Any]) -> Constraint:
    return Constraint(
        name=_text(data, "name"),
        type=_text(data, "type"),
        definition=_text(data, "def"),
        table=_optional_text(data, "table"),
        referenced_table=_optional_text(data, "referencedTable"),
        columns=_strings(data, "columns"),
        referenced_columns=_strings(data, "referencedColumns"),
        comment=_text(data, "comment"),
    )


def _trigger_from_dict(data: dict[str, Any]) -> Trigger:
    return Trigger(
        name=_text(data, "name"),
        definition=_text(data, "def"),
        comment=_text(data, "comment"),
    )


def _function_from_dict(data: dict[str, Any]) -> Function:
    return Function(
        name=_text(data, "name"),
        return_type=_text(data, "returnType"),
        arguments=_text(data, "arguments"),
        type=_text(data, "type"),
    )


def _enum_from_dict(data: dict[str, Any]) -> Enum:
    return Enum(name=_text(data, "name"), values=_strings(data, "values"))


def _group_from_dict(data: dict[str, Any]) -> ViewpointGroup:
    return ViewpointGroup(
        name=_text(data, "name"),
        desc=_text(data, "desc"),
        labels=_strings(data, "labels"),
        tables=_strings(data, "tables"),
        color=_text(data, "color"),
    )


def _viewpoint_from_dict(data: dict[str, Any]) -> Viewpoint:
    return Viewpoint(
        name=_text(data, "name"),
        desc=_text(data, "desc"),
        labels=_strings(data, "labels"),
        tables=_strings(data, "tables"),
        distance=int(data.get("distance") or 0),
        groups=[_group_from_dict(g) for g in data.get("groups") or []],
    )


def _driver_from_dict(data: Optional[dict[str, Any]]) -> Optional[Driver]:
    if data is None:
        return None
    meta_data = data.get("meta")
    meta = None
    if meta_data is not None:
        dictionary = meta_data.get("dict")
        meta = DriverMeta(
            current_schema=_text(meta_data, "currentSchema"),
            search_paths=_strings(meta_data, "searchPaths"),
            dictionary={str(k): str(v) for k, v in dictionary.items()}
            if dictionary is not None
            else None,
        )
    return Driver(
        name=_text(data, "name"),
        database_version=_text(data, "databaseVersion"),
        meta=meta,
    )


def column_from_yaml_dict(data: dict[str, Any]) -> Column:
    """Build a column from its YAML mapping."""
    return Column(
        name=_text(data, "name"),
        type=_text(data, "type"),
        nullable=bool(data.get("nullable", False)),
        default=_optional_text(data, "default"),
        comment=_text(data, "comment"),
        extra_def=_text(data, "extraDef"),
        labels=_labels_from_list(data.get("labels")),
    )


def table_from_yaml_dict(data: dict[str, Any]) -> Table:
    """Build a table; referenced tables are placeholders holding only a name."""
    return Table(
        name=_text(data, "name"),
        type=_text(data, "type"),
        comment=_text(data, "comment"),
        columns=[column_from_yaml_dict(c) for c in data.get("columns") or []],
        indexes=[_index_from_dict(i) for i in data.get("indexes") or []],
        constraints=[_constraint_from_dict(c) for c in data.get("constraints") or []],
        triggers=[_trigger_from_dict(t) for t in data.get("triggers") or []],
        definition=_text(data, "def"),
        labels=_labels_from_list(data.get("labels")),
        referenced_tables=[Table(name=str(n)) for n in data.get("referencedTables") or []],
    )


def relation_from_yaml_dict(data: dict[str, Any]) -> Relation:
    """Build a relation whose tables and columns are name-only placeholders.

    Raises ValueError for an unknown cardinality.
    """
    return Relation(
        table=Table(name=_text(data, "table")),
        columns=[Column(name=name) for name in _strings(data, "columns")],
        cardinality=to_cardinality(_text(data, "cardinality")),
        parent_table=Table(name=_text(data, "parentTable")),
        parent_columns=[Column(name=name) for name in _strings(data, "parentColumns")],
        parent_cardinality=to_cardinality(_text(data, "parentCardinality")),
        definition=_text(data, "def"),
        virtual=bool(data.get("virtual", False)),
    )


def schema_from_yaml_dict(data: dict[str, Any]) -> Schema:
    """Build a schema from its YAML mapping; links are resolved by repair."""
    return Schema(
        name=_text(data, "name"),
        desc=_text(data, "desc"),
        tables=[table_from_yaml_dict(t) for t in data.get("tables") or []],
        relations=[relation_from_yaml_dict(r) for r in data.get("relations") or []],
        functions=[_function_from_dict(f) for f in data.get("functions") or []],
        enums=[_enum_from_dict(e) for e in data.get("enums") or []],
        driver=_driver_from_dict(data.get("driver")),
        labels=_labels_from_list(data.get("labels")),
        viewpoints=Viewpoints(_viewpoint_from_dict(v) for v in data.get("viewpoints") or []),
    )


# --- text -----------------------------------------------------------------

_ENCODERS = (
    (Schema, schema_to_yaml_dict),
    (Table, table_to_yaml_dict),
    (Column, column_to_yaml_dict),
    (Relation, relation_to_yaml_dict),
)


def dumps(obj) -> str:
    """Encode a schema, table, column or relation as YAML text."""
    for kind, encode in _ENCODERS:
        if isinstance(obj, kind):
            data = encode(obj)
            break
    else:
        raise TypeError(f"cannot encode {type(obj).__name__} as schema YAML")
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def loads(text: str) -> Schema:
    """Decode YAML text into a schema whose links are not yet repaired."""
    data = yaml.safe_load(text)
    return schema_from_yaml_dict(_mapping(data, "schema YAML"))