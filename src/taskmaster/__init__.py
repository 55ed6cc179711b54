"""TaskMaster: assignment, client and writer ledger for a writing brokerage."""

__version__ = "0.1.0"
