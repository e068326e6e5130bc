"""
Resource Inlining
=================

Replace every external reference of a document with its content.

Components:
- inliner: ResourceInliner and the inline_document convenience entry point
"""
