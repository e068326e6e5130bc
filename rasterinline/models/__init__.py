"""
Data Models
===========

Pydantic models describing the references a document hands to the inliner
and the reports the inliner hands back.
"""
