"""
TraceChain Framework
====================

A supply chain traceability ledger:
products, the participants that handle them, and an ordered custody trace
per product with a plausibility check on its recorded history.
"""

from tracechain.units.version import get_version, VERSION


__version__ = get_version(VERSION)

__author__ = "Nguyễn Lê Văn Dũng"

__all__ = ["VERSION", "__version__"]
