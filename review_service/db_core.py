"""Declarative base for all ORM models."""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import declarative_base


class Base(AsyncAttrs, declarative_base()):
    """Abstract base class for the service's ORM models."""

    __abstract__ = True
