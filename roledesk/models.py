from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import validates
from .database import Base
from .enums import UserType
from .exceptions import DataIntegrityError
import datetime


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    email_verified_at = Column(DateTime, nullable=True)
    password_hash = Column(String(255), nullable=False)

    # One of UserType's values: 'admin', 'manager', 'user'
    type = Column(String(20), nullable=False, default=UserType.USER.value)

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    @validates("type")
    def _validate_type(self, key, value):
        return UserType.parse(value).value

    @validates("password_hash")
    def _validate_password_hash(self, key, value):
        if not value:
            raise ValueError("password_hash must not be empty")
        return value

    @validates("email")
    def _validate_email(self, key, value):
        value = (value or "").strip().lower()
        if not value:
            raise ValueError("email must not be empty")
        return value

    @property
    def user_type(self) -> UserType:
        """The stored type as a member. Raises DataIntegrityError if the row is corrupt."""
        try:
            return UserType.parse(self.type)
        except ValueError as exc:
            raise DataIntegrityError(f"user {self.id} has invalid type {self.type!r}") from exc

    @property
    def is_verified(self) -> bool:
        return self.email_verified_at is not None

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} type={self.type!r}>"
