"""
Repository for PreorderLink database operations
"""

from sqlalchemy.exc import SQLAlchemyError

from release_tracker.db import db
from release_tracker.models.preorderlink import PreorderLink


class PreorderLinkRepository:
    """Repository for PreorderLink database operations"""

    @staticmethod
    def get_urls_for_game(game_id):
        """Set of URLs already stored for a game"""
        rows = db.session.query(PreorderLink.url).filter(PreorderLink.game_id == game_id).all()
        return {row[0] for row in rows}

    @staticmethod
    def create(**kwargs):
        """Create new PreorderLink record"""
        try:
            item = PreorderLink(**kwargs)
            db.session.add(item)
            db.session.commit()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e