"""
Core modules for papersim.

Contains math primitives, domain models, and persisted-state contracts.
"""
