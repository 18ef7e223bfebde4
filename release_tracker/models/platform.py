"""
Model: Platform
Shared lookup table keyed by unique name
"""

from release_tracker.db import db

game_platforms = db.Table(
    "game_platforms",
    db.Column("game_id", db.Integer, db.ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    db.Column("platform_id", db.Integer, db.ForeignKey("platforms.id", ondelete="CASCADE"), primary_key=True),
)


class Platform(db.Model):
    __tablename__ = "platforms"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name}
