"""Data stores for persistence.

Stores handle:
- PostgreSQL: connection pool, sessions (postgres.py)
- Per-entity stores: users, posts, comments, followers
- Storage facade wiring them together (storage.py)
- Error classification (errors.py)

No request handling in stores - callers map store errors to responses.
"""
