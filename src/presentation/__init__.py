"""Presentation layer - HTTP concerns.

Thin adapters that translate FastAPI requests into the session core's
inputs. Contains NO business logic.
"""
