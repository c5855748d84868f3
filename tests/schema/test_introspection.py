import pytest

from blazeshift.adapters import AdapterExecutionError
from blazeshift.dialects import PostgresDialect
from blazeshift.schema import SchemaIntrospector, TableStorage
from blazeshift.schema.introspection import parse_default, schema_column_type


def test_tables_lists_registered_tables(catalog, apples_columns):
    catalog.add_table("pears", apples_columns)
    catalog.add_table("apples", apples_columns)
    assert SchemaIntrospector(catalog).tables() == ["apples", "pears"]
    sql, params = catalog.executed[-1]
    assert "pg_namespace" in sql
    assert params == ("public",)


def test_columns_parse_types_nullability_and_defaults(catalog):
    catalog.add_table(
        "crates",
        [
            ("id", "integer", None, False, True),
            ("label", "character varying(40)", "'fuji'::character varying", True, False),
            ("weight", "numeric(10,2)", "0", True, False),
            ("ripe", "boolean", "false", False, False),
            ("packed_at", "timestamp without time zone", "getdate()", True, False),
            ("shape", "geometry", None, True, False),
        ],
    )
    columns = {column.name: column for column in SchemaIntrospector(catalog).columns("crates")}

    assert columns["id"].type == "integer"
    assert columns["id"].primary_key is True
    assert columns["id"].allow_null is False

    assert (columns["label"].type, columns["label"].size) == ("string", 40)
    assert columns["label"].default == "fuji"

    assert (columns["weight"].precision, columns["weight"].scale) == (10, 2)
    assert columns["weight"].default == 0

    assert columns["ripe"].default is False
    assert columns["packed_at"].type == "timestamp"
    assert columns["packed_at"].db_default == "getdate()"
    assert columns["packed_at"].default is None

    assert columns["shape"].type is None
    assert columns["shape"].db_type == "geometry"


def test_storage_layout_compound(catalog, apples_columns):
    catalog.add_table(
        "apples", apples_columns, reldiststyle=1, distkey="region", sortkeys=["colour", "crunchiness"]
    )
    storage = SchemaIntrospector(catalog).storage_layout("apples")
    assert storage == TableStorage(
        diststyle="key", distkey="region", sortstyle="compound", sortkeys=["colour", "crunchiness"]
    )


def test_storage_layout_interleaved_keeps_sort_order(catalog, apples_columns):
    catalog.add_table(
        "apples",
        apples_columns,
        reldiststyle=8,
        sortkeys=["colour", "region", "crunchiness"],
        interleaved=True,
    )
    storage = SchemaIntrospector(catalog).storage_layout("apples")
    assert storage.diststyle == "all"
    assert storage.distkey is None
    assert storage.sortstyle == "interleaved"
    assert storage.sortkeys == ["colour", "region", "crunchiness"]


def test_storage_layout_without_options(catalog, apples_columns):
    catalog.add_table("apples", apples_columns)
    assert SchemaIntrospector(catalog).storage_layout("apples") == TableStorage(diststyle="auto")


def test_unknown_reldiststyle_logged_and_ignored(catalog, apples_columns, caplog):
    catalog.add_table("apples", apples_columns, reldiststyle=42)
    storage = SchemaIntrospector(catalog).storage_layout("apples")
    assert storage.diststyle is None
    assert any("Unrecognized reldiststyle" in record.message for record in caplog.records)


def test_catalog_failure_propagates(catalog):
    with pytest.raises(AdapterExecutionError):
        SchemaIntrospector(catalog).storage_layout("missing")


def test_schema_qualified_tables_use_quoted_regclass(catalog, apples_columns):
    catalog.add_table("analytics.apples", apples_columns)
    SchemaIntrospector(catalog).columns("analytics.apples")
    assert catalog.executed[-1][1] == ('"analytics"."apples"',)


@pytest.mark.parametrize(
    "db_type, expected",
    [
        ("character varying(255)", ("string", 255, None, None)),
        ("character(2)", ("string", 2, None, None)),
        ("bigint", ("bigint", None, None, None)),
        ("double precision", ("float", None, None, None)),
        ("numeric(18)", ("decimal", None, 18, None)),
        ("timestamp with time zone", ("timestamptz", None, None, None)),
        ("hllsketch", (None, None, None, None)),
    ],
)
def test_schema_column_type(db_type, expected):
    assert schema_column_type(db_type) == expected


def test_parse_default():
    assert parse_default(None) == (None, None)
    assert parse_default("-3") == (-3, None)
    assert parse_default("1.5") == (1.5, None)
    assert parse_default("'it''s'::character varying") == ("it's", None)
    assert parse_default("TRUE") == (True, None)
    assert parse_default("\"identity\"(1, 0)") == (None, "\"identity\"(1, 0)")


def test_parse_default_quoted_numbers_stay_numeric():
    assert parse_default("'-1'::integer") == (-1, None)
    assert parse_default("'-2.50'::numeric(10,2)") == (-2.5, None)
    assert parse_default("'42'::character varying") == ("42", None)
    assert parse_default("'n/a'::integer") == (None, "'n/a'::integer")


def test_negative_integer_default_reads_as_number(catalog):
    catalog.add_table("crates", [("stock", "integer", "'-1'::integer", True, False)])
    (column,) = SchemaIntrospector(catalog).columns("crates")
    assert column.default == -1
    assert column.db_default is None


def test_storage_layout_skipped_without_layout_support(catalog, apples_columns):
    catalog.add_table("apples", apples_columns, reldiststyle=1, distkey="region")
    storage = SchemaIntrospector(catalog, PostgresDialect()).storage_layout("apples")
    assert storage == TableStorage()
    assert catalog.executed == []
