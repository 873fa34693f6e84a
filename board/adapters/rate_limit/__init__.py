"""Rate limiting adapters.

This package provides a small abstraction layer so the board can start with an
in-memory limiter and later migrate to a shared store without changing the
service layer.
"""
