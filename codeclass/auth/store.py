import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from codeclass.auth.errors import DuplicateEmail, InternalError
from codeclass.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    """User persistence on top of a request-scoped SQLAlchemy session.

    Email uniqueness is enforced by the ``users.email`` unique constraint, so
    concurrent registrations for the same address cannot both succeed.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, user: User) -> User:
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateEmail() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to store user %s.", user.email)
            raise InternalError() from exc

        return user

    def find_by_email(self, email: str) -> User | None:
        try:
            return self.db.query(User).filter(User.email == normalize_email(email)).first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to look up user by email.")
            raise InternalError() from exc

    def find_by_id(self, user_id: int) -> User | None:
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to look up user %s.", user_id)
            raise InternalError() from exc
