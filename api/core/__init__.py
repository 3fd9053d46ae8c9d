"""
Shared, cross-cutting code for the API.

`core/` holds the pieces every feature uses (settings, logging, errors, the
connection pool and tenant-scoped data access). Keep feature-specific logic
in the corresponding feature package (e.g. `tasks/`).
"""
