"""Helpers for end-to-end service mesh tests: retries, request options, templates and versions."""

__version__ = "0.1.0"
__all__ = ["helpers", "request", "retry", "template", "version"]