# app/utils/exceptions.py

from fastapi import HTTPException, status


class StoreOperationException(HTTPException):
    """A read or write against the database failed"""
    def __init__(self, operation: str):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database operation failed: {operation}. Please retry.",
        )
