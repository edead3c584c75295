"""
Expense Tracker

Personal expense tracking behind a token-gated HTTP API. Every user sees
and changes only their own records; monetary values use Decimal throughout.
"""

__version__ = "1.0.0"
