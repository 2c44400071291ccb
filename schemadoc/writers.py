"""Writers that emit a schema or a table as JSON or YAML."""

from __future__ import annotations

from typing import TextIO

from . import jsonio, yamlio
from .model import Schema, Table

__all__ = ["JSONOutput", "YAMLOutput"]


class JSONOutput:
    """Write JSON, indented by two spaces unless ``inline``."""

    def __init__(self, inline: bool = False) -> None:
        self.inline = inline

    def output_schema(self, stream: TextIO, schema: Schema) -> None:
        stream.write(jsonio.dumps(schema, self.inline) + "\n")

    def output_table(self, stream: TextIO, table: Table) -> None:
        stream.write(jsonio.dumps(table, self.inline) + "\n")


class YAMLOutput:
    """Write YAML."""

    def output_schema(self, stream: TextIO, schema: Schema) -> None:
        stream.write(yamlio.dumps(schema))

    def output_table(self, stream: TextIO, table: Table) -> None:
        stream.write(yamlio.dumps(table))