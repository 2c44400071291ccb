import pytest

from schemadoc.cardinality import Cardinality
from schemadoc.model import (
    COLUMN_CHILDREN,
    COLUMN_COMMENT,
    COLUMN_EXTRA_DEF,
    COLUMN_LABELS,
    COLUMN_OCCURRENCES,
    COLUMN_PARENTS,
    COLUMN_PERCENTS,
    Column,
    Constraint,
    Driver,
    DriverMeta,
    Function,
    Index,
    Label,
    Labels,
    NotFoundError,
    Relation,
    Schema,
    Table,
    Trigger,
    Viewpoint,
    Viewpoints,
    match_simple,
)


@pytest.mark.parametrize(
    "schema, name, expected",
    [
        (Schema(), "testtable", "testtable"),
        (
            Schema(driver=Driver(name="postgres", meta=DriverMeta(current_schema="public"))),
            "testtable",
            "public.testtable",
        ),
        (
            Schema(driver=Driver(name="mysql", meta=DriverMeta(current_schema="public"))),
            "testtable",
            "testtable",
        ),
        (
            Schema(driver=Driver(name="postgres", meta=DriverMeta(current_schema=""))),
            "testtable",
            "testtable",
        ),
        (
            Schema(driver=Driver(name="postgres", meta=DriverMeta(current_schema="public"))),
            "other.testtable",
            "other.testtable",
        ),
    ],
)
def test_normalize_table_name(schema, name, expected):
    assert schema.normalize_table_name(name) == expected


def test_normalize_table_names():
    schema = Schema(driver=Driver(name="redshift", meta=DriverMeta(current_schema="public")))
    assert schema.normalize_table_names(["a", "x.b"]) == ["public.a", "x.b"]


def test_find_table_by_name():
    schema = Schema(
        name="testschema",
        tables=[Table(name="a", comment="table a"), Table(name="b", comment="table b")],
    )
    assert schema.find_table_by_name("b").comment == "table b"
    with pytest.raises(NotFoundError, match="not found table 'c'"):
        schema.find_table_by_name("c")


def test_find_table_by_name_normalized():
    schema = Schema(
        tables=[Table(name="public.users")],
        driver=Driver(name="postgres", meta=DriverMeta(current_schema="public")),
    )
    assert schema.find_table_by_name("users").name == "public.users"


def test_match_tables_by_name():
    schema = Schema(tables=[Table(name="user"), Table(name="users"), Table(name="posts")])
    assert [t.name for t in schema.match_tables_by_name("user*")] == ["user", "users"]
    with pytest.raises(NotFoundError):
        schema.match_tables_by_name("comments")


@pytest.mark.parametrize(
    "pattern, name, expected",
    [
        ("*", "anything", True),
        ("", "", True),
        ("", "a", False),
        ("a*", "abc", True),
        ("*c", "abc", True),
        ("a*c", "abbbc", True),
        ("a?c", "abc", False),
        ("a.c", "abc", False),
        ("abc", "abc", True),
    ],
)
def test_match_simple(pattern, name, expected):
    assert match_simple(pattern, name) is expected


def test_find_column_by_name():
    table = Table(
        name="testtable",
        columns=[Column(name="a", comment="column a"), Column(name="b", comment="column b")],
    )
    assert table.find_column_by_name("b").comment == "column b"
    with pytest.raises(NotFoundError, match="not found column 'c' on table 'testtable'"):
        table.find_column_by_name("c")


def test_find_index_constraint_trigger():
    table = Table(
        name="t",
        indexes=[Index(name="idx")],
        constraints=[Constraint(name="pk")],
        triggers=[Trigger(name="trg")],
    )
    assert table.find_index_by_name("idx").name == "idx"
    assert table.find_constraint_by_name("pk").name == "pk"
    assert table.find_trigger_by_name("trg").name == "trg"
    with pytest.raises(NotFoundError):
        table.find_index_by_name("x")
    with pytest.raises(NotFoundError):
        table.find_constraint_by_name("x")
    with pytest.raises(NotFoundError):
        table.find_trigger_by_name("x")


def test_find_constraints_by_column_name():
    table = Table(
        name="testtable",
        columns=[Column(name="a", comment="column a"), Column(name="b", comment="column b")],
    )
    table.constraints = [
        Constraint(
            name="PRIMARY",
            type="PRIMARY KEY",
            definition="PRIMARY KEY(a)",
            table=table.name,
            columns=["a"],
        ),
        Constraint(
            name="UNIQUE",
            type="UNIQUE",
            definition="UNIQUE KEY a (b)",
            table=table.name,
            columns=["b"],
        ),
    ]
    got = table.find_constraints_by_column_name("a")
    assert len(got) == 1
    assert got[0].name == "PRIMARY"


@pytest.mark.parametrize(
    "name, added, expected",
    [
        (COLUMN_EXTRA_DEF, Column(name="b"), False),
        (COLUMN_EXTRA_DEF, Column(name="b", extra_def="ExtraDef"), True),
        (COLUMN_OCCURRENCES, Column(name="b", occurrences=None), False),
        (COLUMN_OCCURRENCES, Column(name="b", occurrences=0), True),
        (COLUMN_PERCENTS, Column(name="b", percents=None), False),
        (COLUMN_PERCENTS, Column(name="b", percents=0.0), True),
        (COLUMN_CHILDREN, Column(name="b"), False),
        (COLUMN_CHILDREN, Column(name="b", child_relations=[Relation()]), True),
        (COLUMN_PARENTS, Column(name="b"), False),
        (COLUMN_PARENTS, Column(name="b", parent_relations=[Relation()]), True),
        (COLUMN_COMMENT, Column(name="b"), False),
        (COLUMN_COMMENT, Column(name="b", comment="comment"), True),
        (COLUMN_LABELS, Column(name="b"), False),
        (COLUMN_LABELS, Column(name="b", labels=Labels([Label(name="TestLabel")])), True),
    ],
)
def test_has_column_with_values(name, added, expected):
    table = Table(name="testTable", columns=[Column(name="a"), added])
    assert table.has_column_with_values(name) is expected


@pytest.mark.parametrize(
    "table, name, hide_columns, expected",
    [
        (Table(name="testTable"), COLUMN_COMMENT, [], True),
        (Table(name="testTable"), COLUMN_COMMENT, [COLUMN_COMMENT], False),
        (
            Table(name="testTable", columns=[Column(name="testColumn", comment="comment")]),
            COLUMN_COMMENT,
            [COLUMN_COMMENT],
            True,
        ),
        (Table(name="testTable"), COLUMN_EXTRA_DEF, [], False),
    ],
)
def test_show_column(table, name, hide_columns, expected):
    assert table.show_column(name, hide_columns) is expected


def test_sort():
    schema = Schema(
        name="testschema",
        tables=[
            Table(name="b", comment="table b"),
            Table(
                name="a",
                comment="table a",
                columns=[Column(name="b", comment="column b"), Column(name="a", comment="column a")],
            ),
        ],
        functions=[Function(name="b", arguments="arg b"), Function(name="b", arguments="arg a")],
        viewpoints=Viewpoints([Viewpoint(name="z"), Viewpoint(name="y")]),
    )
    schema.sort()
    assert schema.tables[0].name == "a"
    assert schema.tables[0].columns[0].name == "a"
    assert schema.functions[0].arguments == "arg a"
    assert [v.name for v in schema.viewpoints] == ["y", "z"]


def _linked_schema():
    a_id = Column(name="id")
    b_a_id = Column(name="a_id")
    a = Table(name="a", columns=[a_id])
    b = Table(name="b", columns=[b_a_id])
    c = Table(name="c", columns=[Column(name="x")])
    relation = Relation(
        table=b,
        columns=[b_a_id],
        parent_table=a,
        parent_columns=[a_id],
        cardinality=Cardinality.ZERO_OR_MORE,
        parent_cardinality=Cardinality.EXACTLY_ONE,
    )
    a_id.child_relations.append(relation)
    b_a_id.parent_relations.append(relation)
    schema = Schema(tables=[a, b, c], relations=[relation])
    return schema, relation


def test_find_relation():
    schema, relation = _linked_schema()
    b_col = schema.tables[1].columns[0]
    a_col = schema.tables[0].columns[0]
    assert schema.find_relation([b_col], [a_col]) is relation
    with pytest.raises(NotFoundError):
        schema.find_relation([Column(name="a_id")], [a_col])


def test_collect_tables_and_relations():
    schema, relation = _linked_schema()
    a = schema.tables[0]

    tables, relations = a.collect_tables_and_relations(0, True)
    assert [t.name for t in tables] == ["a"]
    assert relations == []

    tables, relations = a.collect_tables_and_relations(1, True)
    assert [t.name for t in tables] == ["a", "b"]
    assert relations == [relation]

    tables, relations = a.collect_tables_and_relations(2, True)
    assert [t.name for t in tables] == ["a", "b"]
    assert len(relations) == 1 and relations[0] is relation


def test_collect_without_root_keeps_duplicates():
    schema, relation = _linked_schema()
    tables, relations = schema.tables[0].collect_tables_and_relations(2, False)
    assert [t.name for t in tables] == ["a", "b", "a"]
    assert len(relations) == 2


def test_has_table_with_labels():
    assert Schema(tables=[Table(name="a")]).has_table_with_labels() is False
    labelled = Table(name="b", labels=Labels([Label(name="red")]))
    assert Schema(tables=[Table(name="a"), labelled]).has_table_with_labels() is True


def test_labels_merge_and_contains():
    labels = Labels([Label(name="blue")])
    assert labels.merge("blue") is labels
    merged = labels.merge("red")
    assert [(l.name, l.virtual) for l in merged] == [("blue", False), ("red", True)]
    assert merged.contains("red") is True
    assert labels.contains("red") is False


def test_viewpoints_merge():
    viewpoints = Viewpoints(
        [Viewpoint(name="one", tables=["a", "b"]), Viewpoint(name="two", labels=["x"])]
    )
    replacement = Viewpoint(name="renamed", tables=["b", "a"])
    viewpoints.merge(replacement)
    assert [v.name for v in viewpoints] == ["renamed", "two"]

    by_name = Viewpoint(name="two", tables=["c"])
    viewpoints.merge(by_name)
    assert viewpoints[1] is by_name

    extra = Viewpoint(name="three", tables=["d"])
    viewpoints.merge(extra)
    assert [v.name for v in viewpoints] == ["renamed", "two", "three"]