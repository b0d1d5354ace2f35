"""Errors raised by the repository layer.

Database failures are not wrapped: SQLAlchemy exceptions reach the caller
as-is. Missing rows are reported as None, not as exceptions.
"""


class NoFieldsToUpdateError(ValueError):
    """A partial update carried no fields to set."""

    def __init__(self, entity: str = "record"):
        self.entity = entity
        super().__init__(f"No fields to update for {entity}")
