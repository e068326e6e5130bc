"""
Test Utilities
==============

Shared mocks and assertion helpers for the test suite.
"""
