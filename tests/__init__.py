"""
Test suite for cubic_issuance

Contains:
- tests/unit/          : Unit tests for curve math, contracts and the issuance ledger
"""
