"""
Bootstrap an admin account.

Registration through the API always creates `user` accounts, so the first
admin has to come from here:
    ADMIN_NAME=root ADMIN_PASSWORD=... python -m app.migrations.create_admin_user
"""

import sys
import os

# Ensure project root is on path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from app.database import engine, Base, SessionLocal  # noqa: E402
import app.models  # noqa: E402,F401
from app.schemas.user import User  # noqa: E402
from app.schemas.validation import validate_user  # noqa: E402
from app.services.base import Models  # noqa: E402
from app.services.errors import DuplicateNameError  # noqa: E402
from app.utils.validator import Validator  # noqa: E402


def create_admin(name: str, password: str, models: Models) -> User:
    user = User(name=name, role="admin")
    user.set_password(password)

    v = Validator()
    if not validate_user(v, user).valid():
        raise ValueError(f"invalid admin account: {v.errors}")

    return models.users.insert(user)


def main():
    name = os.getenv("ADMIN_NAME", "admin")
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        print("❌ ADMIN_PASSWORD is not set")
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    try:
        admin = create_admin(name, password, Models.from_session_factory(SessionLocal))
        print(f"✅ Admin '{admin.name}' created (id={admin.id})")
    except DuplicateNameError:
        print(f"⚠️  A user named '{name}' already exists, nothing to do")
    except ValueError as exc:
        print(f"❌ {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
