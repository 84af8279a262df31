"""Test suite for the storefront session core.

Test structure:
- unit/: Unit tests - domain logic and services with mocked collaborators
- integration/: Integration tests - store, cache and repositories against
  fakeredis and a SQLite database, plus end-to-end lifecycle properties
"""
