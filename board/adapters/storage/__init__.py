"""Post storage adapters.

The service layer talks to ``AbstractPostRepository``; the SQLAlchemy
implementation covers PostgreSQL in production and SQLite locally.
"""
