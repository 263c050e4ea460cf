# app/roster/exceptions.py

"""
Custom exceptions for the roster module.
"""

from fastapi import HTTPException, status


class RosterBaseException(HTTPException):
    """Base exception for all roster errors"""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=message)


class RosterRecordNotFoundException(RosterBaseException):
    """Record missing, or owned by another agency"""
    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind.capitalize()} not found: {record_id}", status.HTTP_404_NOT_FOUND)
