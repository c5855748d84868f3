"""
Offline walkthrough: compile Redshift DDL, dump it back, and replay the dump.
"""

from __future__ import annotations

from typing import Dict

from blazeshift.dialects import RedshiftDialect
from blazeshift.schema import SchemaDumper, SchemaScript
from blazeshift.storage import StorageOptions

from .catalog import StubCatalog

TABLE = "harvests"

SCHEMA_SOURCE = '''
with create_table("harvests", distkey="orchard_id", sortkeys=["picked_on", "variety"], sortstyle="interleaved") as t:
    t.integer("orchard_id", nullable=False)
    t.string("variety", size=64)
    t.date("picked_on")
    t.decimal("weight_kg", precision=10, scale=2)
'''

COLUMN_TYPES = [
    ("orchard_id", "integer", False),
    ("variety", "character varying(64)", True),
    ("picked_on", "date", True),
    ("weight_kg", "numeric(10,2)", True),
]


def compile_schema(source: str = SCHEMA_SOURCE) -> list[str]:
    """
    Run a table definition through the Redshift dialect and return its DDL.
    """

    script = SchemaScript(RedshiftDialect())
    script.run(source)
    return script.statements


def run_demo() -> Dict[str, object]:
    created = compile_schema()

    catalog = StubCatalog()
    catalog.register(
        TABLE,
        COLUMN_TYPES,
        StorageOptions(distkey="orchard_id", sortkeys=("picked_on", "variety"), sortstyle="interleaved"),
    )
    dumped = SchemaDumper(catalog).dump_table_schema(TABLE)

    return {"created": created, "dumped": dumped, "replayed": compile_schema(dumped)}


if __name__ == "__main__":
    result = run_demo()
    for statement in result["created"]:
        print(statement)
    print()
    print(result["dumped"])
