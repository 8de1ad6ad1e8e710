"""
Bank Ledger

An in-memory teaching ledger: accounts, postings, transfers, interest
accrual and statements, served over a small REST API.
"""

__version__ = "1.0.0"
