# app/agencies/exceptions.py

"""
Custom exceptions for the agency (tenant) module.
"""

from fastapi import HTTPException, status


class AgencyBaseException(HTTPException):
    """Base exception for all agency errors"""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, headers: dict = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)


class AgencyAlreadyExistsException(AgencyBaseException):
    """An agency is already registered with this email"""
    def __init__(self, email: str):
        super().__init__(f"Agency already exists for {email}", status.HTTP_409_CONFLICT)


class InvalidCredentialsException(AgencyBaseException):
    """Email or password did not match"""
    def __init__(self):
        super().__init__(
            "Incorrect email or password.",
            status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class SessionExpiredException(AgencyBaseException):
    """Token belongs to a signed-out session or a removed agency"""
    def __init__(self):
        super().__init__(
            "Session is no longer valid. Please sign in again.",
            status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AdminKeyRequiredException(AgencyBaseException):
    """Provisioning endpoints need the admin key"""
    def __init__(self):
        super().__init__("A valid admin key is required.", status.HTTP_403_FORBIDDEN)
