"""
Core Business Logic
==================

Core modules of the resource inlining pipeline.

Modules:
- urls: data URI detection, CSS url() extraction and URL resolution
- concurrency: order-preserving fan-out/fan-in of asynchronous workers
- fetching: the fetch collaborator boundary and its default implementation
- inlining: the resource inliner composing the modules above
"""
