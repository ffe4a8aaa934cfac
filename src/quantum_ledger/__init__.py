"""Quantum Ledger: demo crypto portfolio backend (auth and portfolio valuation)."""
