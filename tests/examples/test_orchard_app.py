from examples.orchard_app import compile_schema, run_demo
from examples.orchard_app.demo import SCHEMA_SOURCE


def test_compile_schema_emits_redshift_layout():
    (statement,) = compile_schema()
    assert statement == (
        'CREATE TABLE "harvests" ("orchard_id" INTEGER NOT NULL, "variety" VARCHAR(64), '
        '"picked_on" DATE, "weight_kg" NUMERIC(10, 2)) '
        "DISTKEY (orchard_id) INTERLEAVED SORTKEY (picked_on, variety)"
    )


def test_run_demo_round_trips_through_dump():
    result = run_demo()
    assert result["dumped"] == SCHEMA_SOURCE.strip()
    assert result["replayed"] == result["created"]
