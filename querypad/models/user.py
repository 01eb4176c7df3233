"""ORM model for application users (credential store)."""

from sqlalchemy import Column, Integer, String

from querypad.models.base import Base


class User(Base):
    """User account for JWT authentication. username is unique at the database level."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
