"""
Pytest fixtures and configuration for Release Tracker tests
"""
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest
from werkzeug.security import generate_password_hash

from release_tracker.app import create_app
from release_tracker.db import db
from release_tracker.models import Game, GameStatus, Role, WishlistItem
from release_tracker.repositories.user_repository import UserRepository
from release_tracker.services.catalog_records import CatalogPage, GameDetail
from release_tracker.settings import merge_settings

TODAY = date(2024, 6, 15)
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def app():
    """Application bound to a fresh in-memory database, scheduler off"""
    settings = merge_settings({"sync": {"enabled": False}})
    _app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "RELEASE_TRACKER_SETTINGS": settings,
    })

    with _app.app_context():
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_user(app):
    def _make_user(username="alice", enable_notifications=True, role=Role.ROLE_USER):
        return UserRepository.create(
            username=username,
            email=f"{username}@example.com",
            password=generate_password_hash("correct-horse"),
            enable_notifications=enable_notifications,
            role=role,
        )
    return _make_user


@pytest.fixture
def make_game(app):
    def _make_game(slug="hollow-knight", title=None, release_date=date(2024, 6, 20),
                   status=GameStatus.UPCOMING, updated_at=datetime(2024, 6, 1), **kwargs):
        game = Game(
            slug=slug,
            title=title or slug.replace("-", " ").title(),
            release_date=release_date,
            status=status,
            updated_at=updated_at,
            **kwargs
        )
        db.session.add(game)
        db.session.commit()
        return game
    return _make_game


@pytest.fixture
def wishlist(app):
    def _add(user, game):
        item = WishlistItem(user_id=user.id, game_id=game.id)
        db.session.add(item)
        db.session.commit()
        return item
    return _add


def catalog_game(slug, released="2024-06-20", updated="2024-06-10T10:00:00", name=None,
                 genres=("Action",), platforms=("PC",), tags=()):
    """A games-list entry shaped like the catalog API returns it"""
    return {
        "id": abs(hash(slug)) % 100000,
        "slug": slug,
        "name": name or slug.replace("-", " ").title(),
        "released": released,
        "updated": updated,
        "background_image": f"https://media.example.com/games/{slug}.jpg",
        "esrb_rating": {"id": 4, "name": "Mature", "slug": "mature"},
        "genres": [{"name": g} for g in genres] if genres is not None else None,
        "platforms": [{"platform": {"name": p}} for p in platforms] if platforms is not None else None,
        "tags": [{"slug": t, "name": t.title()} for t in tags],
    }


def catalog_page(*games, next_url=None):
    return CatalogPage.from_json({"count": len(games), "next": next_url, "results": list(games)})


@pytest.fixture
def catalog_client():
    """Catalog client double returning one empty page and no store links"""
    client = MagicMock()
    client.list_stores.return_value = {1: "Steam", 3: "PlayStation Store"}
    client.list_games_page.return_value = catalog_page()
    client.get_game_detail.return_value = GameDetail(
        description="A game.", developer="Team Cherry", publisher="Team Cherry"
    )
    client.list_store_links.return_value = []
    return client
