"""Database package for the Reachbase template library."""
from db.connection import Database
from db.errors import NoFieldsToUpdateError

__all__ = ["Database", "NoFieldsToUpdateError"]
