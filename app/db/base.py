"""
Declarative base - the parent class of every ORM model in the service.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base shared by User and Event."""
    pass
