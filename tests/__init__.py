"""
Test suite for papersim

Contains:
- tests/unit/          : Unit tests for individual modules and the engine facade
"""
