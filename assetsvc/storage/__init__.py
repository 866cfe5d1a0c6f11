"""
Chart store backends.

This package is responsible for:
* The read contract the lookup service depends on (ChartStore).
* In-memory, SQLite and PostgreSQL implementations of it.
* Seeding stores from fixture documents.
"""
