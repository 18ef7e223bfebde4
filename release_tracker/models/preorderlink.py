"""
Model: PreorderLink
Store link for a game, unique per (game, url)
"""

from release_tracker.db import db


class PreorderLink(db.Model):
    __tablename__ = "preorder_links"

    id = db.Column(db.Integer, primary_key=True)
    store_name = db.Column(db.String(50), nullable=False)
    url = db.Column(db.String(1024), nullable=False)
    game_id = db.Column(db.Integer, db.ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)

    game = db.relationship("Game", back_populates="preorder_links")

    __table_args__ = (db.UniqueConstraint("game_id", "url", name="uq_preorder_link_game_url"),)

    def to_dict(self):
        return {"id": self.id, "store_name": self.store_name, "url": self.url}
