import pytest

from schemadoc.cardinality import Cardinality
from schemadoc.jsonio import schema_from_dict, schema_to_dict
from schemadoc.model import (
    Column,
    Driver,
    DriverMeta,
    Label,
    Labels,
    NotFoundError,
    Relation,
    Schema,
    Table,
    Viewpoint,
    Viewpoints,
)
from schemadoc.repair import (
    FilterOption,
    clone,
    clone_without_viewpoints,
    filter_schema,
    repair,
    separate_tables,
)


def _new_test_schema():
    ca = Column(name="a", type="bigint(20)", comment="column a", nullable=False)
    cb = Column(name="b", type="text", comment="column b", nullable=True)
    ta = Table(
        name="a",
        type="BASE TABLE",
        comment="table a",
        columns=[
            ca,
            Column(
                name="a2",
                type="datetime",
                comment="column a2",
                nullable=False,
                default="CURRENT_TIMESTAMP",
            ),
        ],
    )
    tb = Table(
        name="b",
        type="BASE TABLE",
        comment="table b",
        columns=[cb, Column(name="b2", comment="column b2", type="text", nullable=True)],
    )
    r = Relation(table=ta, columns=[ca], parent_table=tb, parent_columns=[cb])
    ca.parent_relations = [r]
    cb.child_relations = [r]
    return Schema(
        name="testschema",
        tables=[ta, tb],
        relations=[r],
        driver=Driver(name="testdriver", database_version="1.0.0", meta=DriverMeta()),
    )


def _labeled_schema():
    ca = Column(name="a", type="INTEGER")
    cb = Column(name="b", type="INTEGER")
    ta = Table(name="a", columns=[ca, Column(name="a2")], labels=Labels([Label("blue")]))
    tb = Table(name="b", columns=[cb, Column(name="b2")], labels=Labels([Label("red")]))
    tc = Table(name="c", columns=[Column(name="c1", labels=Labels([Label("green")]))])
    r = Relation(
        table=tb,
        columns=[cb],
        parent_table=ta,
        parent_columns=[ca],
        cardinality=Cardinality.ONE_OR_MORE,
        parent_cardinality=Cardinality.EXACTLY_ONE,
        definition="FOREIGN KEY (b) REFERENCES a(a)",
    )
    schema = Schema(
        name="testschema",
        tables=[ta, tb, tc],
        relations=[r],
        viewpoints=Viewpoints(
            [
                Viewpoint(name="label blue", labels=["blue"]),
                Viewpoint(name="table c", tables=["c"]),
            ]
        ),
    )
    repair(schema)
    return schema


def _names(tables):
    return [t.name for t in tables]


def test_repair_round_trip():
    want = _new_test_schema()
    got = schema_from_dict(schema_to_dict(want))
    repair(got)
    assert schema_to_dict(got) == schema_to_dict(want)
    column_a = got.tables[0].columns[0]
    assert len(column_a.parent_relations) == 1
    assert column_a.parent_relations[0] is got.relations[0]
    assert got.relations[0].table is got.tables[0]
    assert got.relations[0].parent_columns[0] is got.tables[1].columns[0]
    assert got.tables[1].columns[0].child_relations == [got.relations[0]]


def test_clone():
    want = _new_test_schema()
    got = clone(want)
    assert schema_to_dict(got) == schema_to_dict(want)
    assert got.tables[0] is not want.tables[0]
    assert got.tables[0].columns[0].parent_relations[0] is got.relations[0]
    assert got.tables[0].columns[1].default == "CURRENT_TIMESTAMP"


def test_clone_without_viewpoints_leaves_viewpoint_schema_unset():
    schema = _labeled_schema()
    copy = clone_without_viewpoints(schema)
    assert [v.name for v in copy.viewpoints] == ["label blue", "table c"]
    assert all(v.schema is None for v in copy.viewpoints)
    assert copy.relations[0].table is copy.tables[1]


def test_repair_builds_viewpoint_schemas():
    schema = _labeled_schema()
    assert _names(schema.viewpoints[0].schema.tables) == ["a"]
    assert _names(schema.viewpoints[1].schema.tables) == ["c"]
    assert schema.viewpoints[0].schema.tables[0] is not schema.tables[0]
    assert _names(schema.tables) == ["a", "b", "c"]


def test_repair_marks_unknown_referenced_tables_external():
    ta = Table(name="a")
    view = Table(name="v", referenced_tables=[Table(name="a"), Table(name="missing")])
    schema = Schema(tables=[ta, view])
    repair(schema)
    assert view.referenced_tables[0] is ta
    assert view.referenced_tables[1].external is True
    assert ta.external is False


def test_repair_missing_table_raises():
    schema = Schema(
        tables=[Table(name="a")],
        relations=[Relation(table=Table(name="x"), parent_table=Table(name="a"))],
    )
    with pytest.raises(NotFoundError, match="failed to repair relation"):
        repair(schema)


def test_repair_missing_column_raises():
    schema = Schema(
        tables=[Table(name="a", columns=[Column(name="a")])],
        relations=[
            Relation(
                table=Table(name="a"),
                columns=[Column(name="nope")],
                parent_table=Table(name="a"),
            )
        ],
    )
    with pytest.raises(NotFoundError, match="not found column 'nope'"):
        repair(schema)


def test_separate_by_name_without_distance():
    includes, excludes = separate_tables(_labeled_schema(), FilterOption(include=["a"]))
    assert _names(includes) == ["a"]
    assert _names(excludes) == ["b", "c"]


def test_separate_follows_relations_by_distance():
    includes, excludes = separate_tables(_labeled_schema(), FilterOption(include=["a"], distance=1))
    assert _names(includes) == ["a", "b"]
    assert _names(excludes) == ["c"]


def test_separate_by_column_label():
    includes, _ = separate_tables(_labeled_schema(), FilterOption(include_labels=["green"]))
    assert _names(includes) == ["c"]


def test_separate_by_label_wildcard():
    includes, _ = separate_tables(_labeled_schema(), FilterOption(include_labels=["bl*"]))
    assert _names(includes) == ["a"]


def test_separate_exclude_only():
    includes, excludes = separate_tables(_labeled_schema(), FilterOption(exclude=["c"]))
    assert _names(includes) == ["a", "b"]
    assert _names(excludes) == ["c"]


def test_longer_pattern_wins():
    includes, _ = separate_tables(_labeled_schema(), FilterOption(include=["*"], exclude=["c"]))
    assert _names(includes) == ["a", "b"]
    includes, _ = separate_tables(_labeled_schema(), FilterOption(include=["c"], exclude=["*"]))
    assert _names(includes) == ["c"]


def test_separate_normalizes_names():
    schema = Schema(
        tables=[Table(name="public.a"), Table(name="public.b")],
        driver=Driver(name="postgres", meta=DriverMeta(current_schema="public")),
    )
    includes, excludes = separate_tables(schema, FilterOption(include=["a"]))
    assert _names(includes) == ["public.a"]
    assert _names(excludes) == ["public.b"]


def test_filter_removes_tables_and_relations():
    schema = _labeled_schema()
    filter_schema(schema, FilterOption(include=["a"]))
    assert _names(schema.tables) == ["a"]
    assert schema.relations == []
    assert schema.tables[0].columns[0].child_relations == []


def test_filter_keeps_relations_between_kept_tables():
    schema = _labeled_schema()
    filter_schema(schema, FilterOption(exclude=["c"]))
    assert _names(schema.tables) == ["a", "b"]
    assert len(schema.relations) == 1
    assert schema.tables[1].columns[0].parent_relations == schema.relations