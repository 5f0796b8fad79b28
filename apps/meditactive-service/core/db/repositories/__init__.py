"""
Per-domain repository modules for database access.

Repository functions take an open `Session` and only flush; committing or
rolling back is left to `core.db.transaction` so one aggregate mutation
spans a single transaction.
"""
