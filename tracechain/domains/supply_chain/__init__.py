"""
Supply chain domain for the TraceChain Framework.

Products, participants and per-product custody traces, plus the
timestamp-monotonicity authenticity check over those traces.
"""

from tracechain.domains.supply_chain.authenticity import AuthenticityChecker, AuthenticityReport, is_chronological
from tracechain.domains.supply_chain.ledger import SupplyChainLedger
from tracechain.domains.supply_chain.trace_assembler import TraceAssembler

__all__ = ["AuthenticityChecker", "AuthenticityReport", "SupplyChainLedger", "TraceAssembler", "is_chronological"]
