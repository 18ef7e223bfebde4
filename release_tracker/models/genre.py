"""
Model: Genre
Shared lookup table keyed by unique name
"""

from release_tracker.db import db

game_genres = db.Table(
    "game_genres",
    db.Column("game_id", db.Integer, db.ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    db.Column("genre_id", db.Integer, db.ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Genre(db.Model):
    __tablename__ = "genres"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name}
