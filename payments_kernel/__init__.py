"""
Payments Kernel

A transactional ledger core for client/contractor money movement with:
- Atomic job settlement (client -> contractor) with no overdraft
- Single-payment guarantee per job under concurrent callers
- Discretionary deposits capped by in-progress contractual volume
- Read-only earnings and spending leaderboards over a date window
"""

__version__ = "0.1.0"
