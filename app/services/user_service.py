from sqlalchemy.exc import IntegrityError
import logging

from app.models.user import User as UserModel
from app.schemas.user import User
from app.services.base import UserStore
from app.services.errors import DuplicateNameError, RecordNotFoundError
from app.services.sql_base import SQLAlchemyStore, is_unique_violation

logger = logging.getLogger(__name__)


class UserService(SQLAlchemyStore, UserStore):

    def insert(self, user: User) -> User:
        with self.transaction() as db:
            row = UserModel(name=user.name, password_hash=user.password_hash, role=user.role)
            db.add(row)
            try:
                db.flush()
            except IntegrityError as e:
                if is_unique_violation(e, "name"):
                    raise DuplicateNameError("duplicate user name") from e
                raise
            created = User(id=row.id, name=row.name, role=row.role, password_hash=row.password_hash)

        logger.info(f"User created: {created.name} ({created.role})")
        return created

    def get(self, name: str) -> User:
        with self.transaction() as db:
            row = db.query(UserModel).filter(UserModel.name == name).first()
            if not row:
                raise RecordNotFoundError()
            return User(id=row.id, name=row.name, role=row.role, password_hash=row.password_hash)
