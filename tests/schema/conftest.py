import pytest

from blazeshift.adapters import AdapterExecutionError
from blazeshift.dialects import RedshiftDialect
from blazeshift.storage import DistStyle, SortStyle, StorageOptions


class FakeCursor:
    def __init__(self, rows=()):
        self.rows = list(rows)

    def fetchall(self):
        return list(self.rows)

    def fetchone(self):
        return self.rows[0] if self.rows else None


class FakeCatalogAdapter:
    """Answers the introspection queries from tables registered in memory."""

    def __init__(self):
        self.dialect = RedshiftDialect()
        self.tables = {}
        self.executed = []

    def add_table(
        self, name, columns, *, schema="public", reldiststyle=10, distkey=None, sortkeys=(), interleaved=False
    ):
        positions = {column: index + 1 for index, column in enumerate(sortkeys)}
        sign = -1 if interleaved else 1
        layout = [(col[0], col[0] == distkey, sign * positions.get(col[0], 0)) for col in columns]
        qualified = name if schema == "public" else f"{schema}.{name}"
        self.tables[self.dialect.format_table(qualified)] = {
            "schema": schema,
            "name": name,
            "columns": columns,
            "reldiststyle": reldiststyle,
            "layout": layout,
        }

    def add_table_from_options(self, name, columns, options, *, schema="public"):
        """Register a table the way Redshift records a CREATE TABLE with these options."""
        if options.diststyle is not None:
            reldiststyle = {DistStyle.EVEN: 0, DistStyle.KEY: 1, DistStyle.ALL: 8}[options.diststyle]
        elif options.distkey is not None:
            reldiststyle = 1
        else:
            reldiststyle = 10
        self.add_table(
            name,
            columns,
            schema=schema,
            reldiststyle=reldiststyle,
            distkey=options.distkey,
            sortkeys=options.sortkeys,
            interleaved=options.sortstyle is SortStyle.INTERLEAVED,
        )

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if "relkind" in sql:
            names = sorted(table["name"] for table in self.tables.values() if table["schema"] == params[0])
            return FakeCursor([(name,) for name in names])
        table = self.tables.get(params[0])
        if table is None:
            raise AdapterExecutionError(f"relation {params[0]} does not exist")
        if "format_type" in sql:
            return FakeCursor(table["columns"])
        if "reldiststyle" in sql:
            return FakeCursor([(table["reldiststyle"],)])
        if "attsortkeyord" in sql:
            return FakeCursor(table["layout"])
        raise AssertionError(f"unexpected catalog query: {sql}")


def varchar_column(name, size=255):
    return (name, f"character varying({size})", None, True, False)


@pytest.fixture
def catalog():
    return FakeCatalogAdapter()


@pytest.fixture
def apples_columns():
    return [varchar_column("region"), varchar_column("crunchiness"), varchar_column("colour")]
