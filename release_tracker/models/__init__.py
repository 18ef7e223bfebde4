"""
Models package

One file per table; import from here:
    from release_tracker.models import Game, Genre, Platform
"""

from .gamestatus import GameStatus
from .role import Role
from .genre import Genre, game_genres
from .platform import Platform, game_platforms
from .game import Game
from .preorderlink import PreorderLink
from .user import User
from .wishlist import WishlistItem
from .notification import Notification
from .catalogsynclog import CatalogSyncLog

__all__ = [
    "GameStatus",
    "Role",
    "Genre",
    "game_genres",
    "Platform",
    "game_platforms",
    "Game",
    "PreorderLink",
    "User",
    "WishlistItem",
    "Notification",
    "CatalogSyncLog",
]
