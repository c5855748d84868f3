import pytest

from blazeshift.dialects import RedshiftDialect
from blazeshift.schema import SchemaScript
from blazeshift.storage import InvalidSortStyle, UnknownStorageOption


def test_create_table_block_records_ddl():
    script = SchemaScript(RedshiftDialect())
    with script.create_table("apples", distkey="region", sortkeys=["colour", "crunchiness"]) as t:
        t.string("region")
        t.string("colour")
        t.string("crunchiness")
    assert script.statements == [
        'CREATE TABLE "apples" ("region" VARCHAR(255), "colour" VARCHAR(255), '
        '"crunchiness" VARCHAR(255)) DISTKEY (region) SORTKEY (colour, crunchiness)'
    ]
    assert not script.operations[0].destructive


def test_unknown_option_rejected_before_body_runs():
    script = SchemaScript(RedshiftDialect())
    entered = []
    with pytest.raises(UnknownStorageOption):
        with script.create_table("apples", distribution="even") as t:
            entered.append(t)
    assert entered == []
    assert script.operations == []


def test_invalid_sortstyle_produces_no_operations():
    script = SchemaScript(RedshiftDialect())
    with pytest.raises(InvalidSortStyle):
        with script.create_table("apples", sortkeys=["colour"], sortstyle="zigzag") as t:
            t.string("colour")
    assert script.operations == []


def test_replace_records_forced_drop():
    script = SchemaScript(RedshiftDialect())
    with script.create_table("apples", replace=True) as t:
        t.string("colour")
    drop, create = script.operations
    assert drop.sql == 'DROP TABLE IF EXISTS "apples"'
    assert drop.destructive and drop.force
    assert create.sql.startswith('CREATE TABLE "apples"')


def test_drop_table_is_destructive_and_unforced():
    script = SchemaScript(RedshiftDialect())
    script.drop_table("apples")
    (op,) = script.operations
    assert op.destructive is True
    assert op.force is False


def test_run_executes_top_level_blocks():
    source = (
        'with create_table("apples", diststyle="even") as t:\n'
        '    t.string("colour", size=32)\n'
    )
    operations = SchemaScript(RedshiftDialect()).run(source)
    assert [op.sql for op in operations] == [
        'CREATE TABLE "apples" ("colour" VARCHAR(32)) DISTSTYLE EVEN'
    ]


def test_run_calls_migration_entrypoint():
    source = (
        "def upgrade(schema):\n"
        '    with schema.create_table("apples", sortkeys=["colour"]) as t:\n'
        '        t.string("colour", size=32)\n'
        "\n"
        "def downgrade(schema):\n"
        '    schema.drop_table("apples")\n'
    )
    upgrade = SchemaScript(RedshiftDialect()).run(source)
    assert upgrade[0].sql.endswith(" SORTKEY (colour)")

    downgrade = SchemaScript(RedshiftDialect()).run(source, entrypoint="downgrade")
    assert [op.sql for op in downgrade] == ['DROP TABLE IF EXISTS "apples"']


def test_run_allows_simple_helpers_in_migrations():
    source = (
        "def upgrade(schema):\n"
        "    for year in range(2023, 2025):\n"
        '        with schema.create_table(f"harvests_{year}") as t:\n'
        '            t.date("picked_on")\n'
    )
    operations = SchemaScript(RedshiftDialect()).run(source)
    assert [op.sql.split(" (")[0] for op in operations] == [
        'CREATE TABLE "harvests_2023"',
        'CREATE TABLE "harvests_2024"',
    ]


def test_run_exposes_only_schema_builtins():
    script = SchemaScript(RedshiftDialect())
    with pytest.raises(NameError):
        script.run('open("/etc/passwd")')
    with pytest.raises(NameError):
        script.run('__import__("os")')
    assert script.operations == []
