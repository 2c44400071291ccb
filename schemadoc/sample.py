"""A small, fully linked schema for examples and tests."""

from __future__ import annotations

from .cardinality import Cardinality
from .model import (
    Column,
    Constraint,
    Driver,
    DriverMeta,
    Enum,
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
from .repair import repair

__all__ = ["new_schema"]


def new_schema() -> Schema:
    """Build and repair a schema of two tables, a view, an enum and viewpoints."""
    blue = Label(name="blue", virtual=False)
    red = Label(name="red", virtual=False)
    green = Label(name="green", virtual=True)

    ca = Column(name="a", type="INTEGER", comment="column a")
    cb = Column(name="b", type="INTEGER", comment="column b")
    c_view = Column(name="view_column", type="INTEGER", comment="column of view")

    ta = Table(
        name="a",
        comment="table a",
        columns=[ca, Column(name="a2", type="TEXT", comment="column a2")],
        labels=Labels([blue, green]),
    )
    ta.indexes = [
        Index(name="PRIMARY KEY", definition="PRIMARY KEY(a)", table=ta.name, columns=["a"])
    ]
    ta.constraints = [Constraint(name="PRIMARY", table=ta.name, definition="PRIMARY KEY (a)")]
    ta.triggers = [
        Trigger(
            name="update_a_a2",
            definition="CREATE CONSTRAINT TRIGGER update_a_a2 AFTER INSERT OR UPDATE ON a",
        )
    ]
    tb = Table(
        name="b",
        comment="table b",
        columns=[cb, Column(name="b2", type="TEXT", comment="column b2")],
        labels=Labels([red, green]),
    )
    t_view = Table(
        name="view",
        comment="view",
        columns=[c_view],
        type="VIEW",
        definition="CREATE VIEW view AS SELECT a, b FROM a JOIN b ON a.a = b.b",
        referenced_tables=[ta, tb],
    )

    relation = Relation(
        table=tb,
        columns=[cb],
        cardinality=Cardinality.ONE_OR_MORE,
        parent_table=ta,
        parent_columns=[ca],
        parent_cardinality=Cardinality.EXACTLY_ONE,
        definition="FOREIGN KEY (b) REFERENCES a(a)",
        virtual=False,
    )
    ca.child_relations = [relation]
    cb.parent_relations = [relation]

    schema = Schema(
        name="testschema",
        tables=[ta, tb, t_view],
        enums=[Enum(name="enum", values=["one", "two", "three"])],
        relations=[relation],
        viewpoints=Viewpoints(
            [
                Viewpoint(name="table a b", desc="select table a and b", tables=["a", "b"]),
                Viewpoint(name="label blue", desc="select label blue", labels=["blue"]),
                Viewpoint(
                    name="label green",
                    desc="select label green",
                    labels=["green"],
                    groups=[
                        ViewpointGroup(name="label red", desc="select label red", labels=["red"])
                    ],
                ),
                Viewpoint(
                    name="table a label red",
                    desc="select table a and label red\n\n- table a\n- label red",
                    tables=["a"],
                    labels=["red"],
                ),
            ]
        ),
        driver=Driver(name="testdriver", database_version="1.0.0", meta=DriverMeta()),
    )
    repair(schema)
    return schema