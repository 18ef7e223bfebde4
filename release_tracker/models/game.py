"""
Model: Game
Local copy of a catalog record, joined to the external source by slug
"""

from release_tracker.db import db, now_utc
from release_tracker.models.gamestatus import GameStatus
from release_tracker.models.genre import game_genres
from release_tracker.models.platform import game_platforms
from release_tracker.utils import isoformat_utc


class Game(db.Model):
    __tablename__ = "games"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    cover_image_url = db.Column(db.String(512))
    release_date = db.Column(db.Date, nullable=False)
    developer = db.Column(db.String(255))
    publisher = db.Column(db.String(255))
    slug = db.Column(db.String(255), unique=True, index=True)
    status = db.Column(db.Enum(GameStatus, native_enum=False, length=20), nullable=False, default=GameStatus.UPCOMING)
    age_rating = db.Column(db.String(20))
    mature = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=now_utc)
    # Stamped by the catalog sync on every write, compared against the catalog's own timestamp
    updated_at = db.Column(db.DateTime, nullable=False, default=now_utc)

    genres = db.relationship("Genre", secondary=game_genres, lazy="selectin")
    platforms = db.relationship("Platform", secondary=game_platforms, lazy="selectin")
    preorder_links = db.relationship(
        "PreorderLink", back_populates="game", lazy="selectin", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.Index("idx_games_title", "title"),
        db.Index("idx_games_status", "status"),
        db.Index("idx_games_release_date", "release_date"),
    )

    def to_summary_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "cover_image_url": self.cover_image_url,
            "release_date": self.release_date.isoformat() if self.release_date else None,
            "status": self.status.value if self.status else None,
            "mature": self.mature,
            "genres": sorted(g.name for g in self.genres),
            "platforms": sorted(p.name for p in self.platforms),
        }

    def to_detail_dict(self):
        data = self.to_summary_dict()
        data.update({
            "description": self.description,
            "developer": self.developer,
            "publisher": self.publisher,
            "age_rating": self.age_rating,
            "preorder_links": [link.to_dict() for link in self.preorder_links],
            "updated_at": isoformat_utc(self.updated_at),
        })
        return data
