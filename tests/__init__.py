"""
Test Suite
==========

Test suite matching the rasterinline/ package structure.

Test Categories:
- unit: Unit tests for individual components
"""
