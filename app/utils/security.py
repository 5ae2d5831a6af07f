from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from dotenv import load_dotenv
import os

# Load environment variables
load_dotenv()

# bcrypt cost factor; 12 keeps a verification around a few hundred milliseconds
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

# bcrypt ignores everything past this; longer passwords are rejected at registration
MAX_PASSWORD_BYTES = 72


class PasswordHashError(Exception):
    """Stored hash is corrupt or not a bcrypt hash"""


# Password hashing
def hash_password(password: str) -> str:
    """Hash a plaintext password of at most MAX_PASSWORD_BYTES"""
    return pwd_context.hash(password)


# Password verification
def password_matches(plain_password: str, hashed_password: str) -> bool:
    """
    Compare a plaintext password with a stored hash.

    Returns False on a plain mismatch and raises PasswordHashError when the
    stored hash itself cannot be used.
    """
    if not hashed_password:
        raise PasswordHashError("empty password hash")
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        # No stored password is this long
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError, TypeError) as e:
        raise PasswordHashError(str(e)) from e
