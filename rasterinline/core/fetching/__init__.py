"""
Resource Fetching
=================

Boundary to the transport that loads referenced resources.

Components:
- fetcher: ResourceFetcher interface, FetchError and the aiohttp-based default
"""
