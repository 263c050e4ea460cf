# app/utils/security.py

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify an agency password against its stored hash
    Args:
        password: str
        hashed_password: str
    Returns:
        bool
    """
    if not hashed_password:
        return False
    return pwd_context.verify(password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash an agency password for storage
    Args:
        password: str
    Returns:
        str
    """
    return pwd_context.hash(password)
