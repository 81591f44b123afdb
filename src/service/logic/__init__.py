"""
Business Logic Layer Module.

Sits between the API handlers and the data access layer: enforces the rules
that span more than one record (category membership, parent links, unique
emails with audit trail) and raises taxonomy errors the request boundary
turns into responses.
"""

__version__ = "1.0.0"
