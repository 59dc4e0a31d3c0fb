"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy statements for each domain area and
translate store failures into src.core.errors.StorageError.
"""
