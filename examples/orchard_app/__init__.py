"""
Orchard example: a Redshift fact table with a distribution key and an
interleaved sort key, compiled, dumped and replayed without a cluster.
"""

from .catalog import StubCatalog
from .demo import compile_schema, run_demo

__all__ = ["StubCatalog", "compile_schema", "run_demo"]
