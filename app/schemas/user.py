from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from typing import Optional

from app.utils.security import MAX_PASSWORD_BYTES, hash_password, password_matches

ROLES = ("user", "admin")


class UserCreate(BaseModel):
    """Schema for user registration"""
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    password: str = ""


class User(BaseModel):
    """
    User record as loaded from a store.

    The plaintext password is only kept in memory between set_password() and
    validation; it is never persisted or serialized.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    name: str = ""
    role: str = ""
    password_hash: Optional[str] = Field(None, exclude=True)

    _password_plaintext: Optional[str] = PrivateAttr(default=None)

    @property
    def password_plaintext(self) -> Optional[str]:
        return self._password_plaintext

    @property
    def is_anonymous(self) -> bool:
        return self is ANONYMOUS_USER

    def set_password(self, plaintext: str) -> None:
        """Over-long passwords are kept unhashed so validate_user can report them"""
        self._password_plaintext = plaintext
        if len(plaintext.encode("utf-8")) <= MAX_PASSWORD_BYTES:
            self.password_hash = hash_password(plaintext)

    def password_matches(self, plaintext: str) -> bool:
        """Raises PasswordHashError when the stored hash is unusable"""
        return password_matches(plaintext, self.password_hash)


# Identity of every unauthenticated request; compare with `is`
ANONYMOUS_USER = User()


class UserResponse(BaseModel):
    id: int
    name: str
    role: str
    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    user: UserResponse
