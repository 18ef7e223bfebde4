"""
Repository for Game database operations
"""

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from release_tracker.db import db
from release_tracker.models.game import Game
from release_tracker.models.genre import Genre
from release_tracker.models.platform import Platform


class GameRepository:
    """Repository for Game database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Game by primary key ID"""
        return db.session.get(Game, id)

    @staticmethod
    def get_by_slug(slug):
        """Get Game by its catalog slug"""
        return Game.query.filter_by(slug=slug).first()

    @staticmethod
    def get_all_by_ids(ids):
        """Get all Games whose ID is in `ids` in a single query"""
        if not ids:
            return []
        return Game.query.filter(Game.id.in_(list(ids))).all()

    @staticmethod
    def get_paged(
        page,
        per_page,
        status=None,
        query_text=None,
        genres=None,
        platforms=None,
        released_after=None,
        include_mature=False,
    ):
        """
        Database-level pagination for the catalog listing, ordered by release date
        """
        query = Game.query

        if not include_mature:
            query = query.filter(Game.mature.is_(False))

        if status:
            query = query.filter(Game.status == status)

        if query_text:
            query = query.filter(
                or_(
                    Game.title.ilike(f"%{query_text}%"),
                    Game.developer.ilike(f"%{query_text}%"),
                    Game.publisher.ilike(f"%{query_text}%"),
                )
            )

        # Any of the given names matches
        if genres:
            query = query.filter(Game.genres.any(Genre.name.in_(genres)))

        if platforms:
            query = query.filter(Game.platforms.any(Platform.name.in_(platforms)))

        if released_after:
            query = query.filter(Game.release_date > released_after)

        total = query.count()
        items = (
            query.order_by(Game.release_date.asc(), Game.id.asc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return items, total

    @staticmethod
    def save(game):
        """Insert or update a Game, committing immediately"""
        try:
            db.session.add(game)
            db.session.commit()
            return game
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def count():
        """Count total Game records"""
        return Game.query.count()
