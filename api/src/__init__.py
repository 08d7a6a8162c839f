"""FastAPI service for student and user records.

This package provides REST API endpoints for creating, reading, updating
and deleting student records and for managing users, backed by PostgreSQL.
"""

__version__ = "0.1.0"
