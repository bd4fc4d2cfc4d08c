"""Request handlers: record CRUD, profile aggregation, search and export.

Every handler takes the ``AsyncSession`` it should use as its first
argument and never reaches for a global connection.
"""
