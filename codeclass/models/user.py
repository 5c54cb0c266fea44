"""User model definitions."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, func
from codeclass.database import Base


class Role(str, enum.Enum):
    """Closed set of account roles."""
    STUDENT = "student"
    PROFESSOR = "professor"


class User(Base):
    """Represents a registered student or professor."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, values_callable=lambda roles: [role.value for role in roles]),
        nullable=False,
        default=Role.STUDENT,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
