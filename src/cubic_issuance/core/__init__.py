"""
Core domain models, mathematical primitives, and error taxonomy.

This module contains the foundational building blocks that are independent
of the external unit ledger and value transport.
"""
