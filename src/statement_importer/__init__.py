"""Interactive bank statement classification with learned snippet patterns."""

__version__ = "0.1.0"
