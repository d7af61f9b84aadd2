"""Timelock Vault — single-use, two-party time-locked escrow."""

__version__ = "0.1.0"
