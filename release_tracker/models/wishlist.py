"""
Model: WishlistItem
Composite key (user, game)
"""

from release_tracker.db import db, now_utc


class WishlistItem(db.Model):
    __tablename__ = "wishlist_items"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey("games.id", ondelete="CASCADE"), primary_key=True, index=True)
    added_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    user = db.relationship("User", lazy="joined")
    game = db.relationship("Game", lazy="joined")
