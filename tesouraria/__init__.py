"""tesouraria - cash-drawer reconciliation for end-of-shift balancing."""

__version__ = "0.1.0"
