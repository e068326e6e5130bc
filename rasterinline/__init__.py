"""
Raster Inline
=============

Resource inlining pipeline for HTML rasterization.

Before a document is serialized into an SVG wrapper and painted, every external
reference it carries has to be replaced by its content so the result is
self-contained.

This package provides:
- URL helpers: data URI detection, CSS url() extraction and base-href resolution
- An order-preserving fan-out/fan-in combinator for asynchronous workers
- A fetch collaborator boundary with an aiohttp-based default implementation
- The resource inliner that composes all of the above
"""

__version__ = "1.0.0"
__author__ = "Raster Inline Team"
