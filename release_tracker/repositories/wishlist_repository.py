"""
Repository for WishlistItem database operations
"""

from sqlalchemy.exc import SQLAlchemyError

from release_tracker.db import db
from release_tracker.models.game import Game
from release_tracker.models.wishlist import WishlistItem


class WishlistRepository:
    """Repository for WishlistItem database operations"""

    @staticmethod
    def get(user_id, game_id):
        """Get the wishlist entry for a (user, game) pair"""
        return db.session.get(WishlistItem, (user_id, game_id))

    @staticmethod
    def exists(user_id, game_id):
        return WishlistRepository.get(user_id, game_id) is not None

    @staticmethod
    def get_by_game_ids(game_ids):
        """All wishlist entries referencing any of `game_ids`, users eagerly loaded"""
        if not game_ids:
            return []
        return WishlistItem.query.filter(WishlistItem.game_id.in_(list(game_ids))).all()

    @staticmethod
    def get_games_by_user(user_id):
        """Games on a user's wishlist, most recently added first"""
        return (
            Game.query.join(WishlistItem, WishlistItem.game_id == Game.id)
            .filter(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.added_at.desc())
            .all()
        )

    @staticmethod
    def create(**kwargs):
        """Create new WishlistItem record"""
        try:
            item = WishlistItem(**kwargs)
            db.session.add(item)
            db.session.commit()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete(item):
        db.session.delete(item)
        db.session.commit()
        return True
