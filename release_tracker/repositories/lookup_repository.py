"""
Repositories for the shared Genre and Platform lookup tables
"""

import logging

from sqlalchemy.exc import IntegrityError

from release_tracker.db import db
from release_tracker.models.genre import Genre
from release_tracker.models.platform import Platform

logger = logging.getLogger("main")


class _NamedLookupRepository:
    """Find-or-create access to a table of globally unique names"""

    model = None

    @classmethod
    def get_by_name(cls, name):
        return cls.model.query.filter_by(name=name).first()

    @classmethod
    def find_or_create(cls, name):
        """
        Return the row for `name`, inserting it if missing.

        The insert runs inside a SAVEPOINT so that losing a race against a
        concurrent writer (unique constraint on name) only rolls back the
        savepoint, after which the winner's row is read back.
        """
        existing = cls.get_by_name(name)
        if existing is not None:
            return existing

        item = cls.model(name=name)
        try:
            with db.session.begin_nested():
                db.session.add(item)
        except IntegrityError:
            logger.debug(f"{cls.model.__name__} '{name}' was created concurrently, re-reading")
            existing = cls.get_by_name(name)
            if existing is None:
                raise
            return existing

        db.session.commit()
        return item

    @classmethod
    def find_or_create_all(cls, names):
        return {cls.find_or_create(name) for name in sorted(set(names))}


class GenreRepository(_NamedLookupRepository):
    """Repository for Genre database operations"""
    model = Genre


class PlatformRepository(_NamedLookupRepository):
    """Repository for Platform database operations"""
    model = Platform
