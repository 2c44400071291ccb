# schemadoc

An in-memory model of a database schema (tables, columns, indexes,
constraints, triggers, relations, functions, enums, labels and
viewpoints) with tools to link cross references, filter tables, clone
a schema, and write it as JSON or YAML.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Loading and repairing a schema

`schemadoc.jsonio.loads` and `schemadoc.yamlio.loads` turn text into a
`Schema`. In a freshly loaded schema, relations and referenced tables
only carry names. `schemadoc.repair.repair` links them to the actual
`Table` and `Column` objects, fills each column's `parent_relations`
and `child_relations`, marks referenced tables that are not in the
schema as `external`, and builds a filtered schema for each viewpoint.

```python
from schemadoc import jsonio
from schemadoc.repair import repair

with open("schema.json", encoding="utf-8") as fh:
    schema = jsonio.loads(fh.read())
repair(schema)

users = schema.find_table_by_name("users")
tables, relations = users.collect_tables_and_relations(1, True)
```

`Schema.find_table_by_name`, `Schema.match_tables_by_name`,
`Schema.find_relation`, `Table.find_column_by_name` and the other
`find_*` methods raise `schemadoc.model.NotFoundError` when nothing
matches. For the `postgres` and `redshift` drivers, unqualified table
names are qualified with the driver's current schema before comparing.

`schemadoc.repair.clone` returns a repaired deep copy of a schema;
`clone_without_viewpoints` does the same but leaves viewpoints unbuilt.
`Schema.sort` sorts tables, columns, indexes, constraints, triggers,
relations, functions and viewpoints in place.

## Filtering

```python
from schemadoc.repair import FilterOption, filter_schema

filter_schema(schema, FilterOption(include=["users", "posts*"], exclude=["posts_tmp"], distance=1))
```

Patterns accept `*` as the only wildcard. A table matching an include
pattern is kept unless it also matches an exclude pattern that is
longer (not counting `*`). With `include_labels`, tables whose own or
column labels match are kept unless excluded. With no include patterns
and no labels, every table not excluded is kept. Tables within
`distance` relations of a kept table are kept as well.
`separate_tables` returns the kept and removed tables without changing
the schema.

## Output

```python
import sys
from schemadoc.writers import JSONOutput, YAMLOutput

JSONOutput(inline=False).output_schema(sys.stdout, schema)
YAMLOutput().output_table(sys.stdout, schema.tables[0])
```

`jsonio.dumps` and `yamlio.dumps` return the text instead of writing it;
`schema_to_dict`, `table_to_dict` and their YAML counterparts return
plain mappings.

`schemadoc.render` holds text helpers for document templates:
`nl2br`, `nl2br_slash`, `nl2mdnl`, `nl2space`, `escape_nl`,
`escape_double_quote`, `show_only_first_paragraph`, `label_join`,
`escape_url`, `escape_mermaid`, `left_cardinality` and
`right_cardinality`. `template_functions(dictionary)` returns them in
one mapping, together with a `lookup` function that translates words
through the given dictionary.

## Cardinality

```python
from schemadoc.cardinality import Cardinality, to_cardinality

assert to_cardinality("Zero or One") is Cardinality.ZERO_OR_ONE
```

`to_cardinality` raises `ValueError` for a spelling it does not know.

## Sample data

`schemadoc.sample.new_schema()` returns a small repaired schema with
two tables, a view, one relation, an enum, labels and four viewpoints.

## What this package does not do

It does not connect to databases or read their catalogs; a schema has
to be built in code or loaded from JSON or YAML. It has no command-line
tool, no template engine, and no Markdown, spreadsheet or diagram
output: the helpers in `schemadoc.render` are only the text functions
such templates would use.