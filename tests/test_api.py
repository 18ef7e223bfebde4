"""
Tests for API endpoints
"""
from datetime import date, datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from release_tracker.constants import SYNC_STATUS_COMPLETED
from release_tracker.db import db
from release_tracker.models import CatalogSyncLog, Notification, PreorderLink, Role, User, WishlistItem
from release_tracker.repositories.game_repository import GameRepository
from release_tracker.repositories.lookup_repository import GenreRepository, PlatformRepository


def register(client, username="alice", password="correct-horse"):
    return client.post("/api/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
    })


@pytest.fixture
def logged_in(client):
    response = register(client)
    assert response.status_code == 201
    return response.get_json()["data"]


class TestAuthEndpoints:

    def test_register_and_me(self, client, logged_in):
        response = client.get("/api/users/me")

        assert response.status_code == 200
        assert response.get_json()["data"]["username"] == "alice"
        assert "password" not in response.get_json()["data"]

    def test_register_duplicate_is_conflict(self, client, logged_in):
        response = register(client)

        assert response.status_code == 409
        assert response.get_json()["code"] == "CONFLICT"

    def test_login_with_bad_password(self, client, make_user):
        make_user("alice")

        response = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

        assert response.status_code == 401

    def test_login_and_logout(self, client, make_user):
        make_user("alice")

        assert client.post("/api/auth/login", json={"username": "alice", "password": "correct-horse"}).status_code == 200
        assert client.post("/api/auth/logout").status_code == 200
        assert client.get("/api/users/me").status_code == 401

    def test_disable_notifications(self, client, logged_in):
        response = client.put("/api/users/me", json={"enable_notifications": False})

        assert response.status_code == 200
        assert response.get_json()["data"]["enable_notifications"] is False

    def test_register_creates_regular_user(self, client, logged_in):
        assert logged_in["role"] == "ROLE_USER"

    def test_non_json_body_is_rejected(self, client):
        response = client.post("/api/auth/login", data="username=alice")

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"


def login(client, username, password="correct-horse"):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.get_json()["data"]


@pytest.fixture
def admin(client, make_user):
    user = make_user("root", role=Role.ROLE_ADMIN)
    login(client, "root")
    return user


class TestUserEndpoints:

    def test_update_username(self, client, logged_in):
        response = client.put("/api/users/me", json={"username": "alice2"})

        assert response.status_code == 200
        assert response.get_json()["data"]["username"] == "alice2"

    def test_change_password(self, client, logged_in):
        response = client.put("/api/users/me/password", json={
            "old_password": "correct-horse",
            "new_password": "battery-staple",
            "confirm_password": "battery-staple",
        })
        assert response.status_code == 204

        client.post("/api/auth/logout")
        assert client.post("/api/auth/login", json={"username": "alice", "password": "correct-horse"}).status_code == 401
        login(client, "alice", "battery-staple")

    def test_change_password_with_wrong_current(self, client, logged_in):
        response = client.put("/api/users/me/password", json={
            "old_password": "wrong-horse",
            "new_password": "battery-staple",
            "confirm_password": "battery-staple",
        })

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"

    def test_change_password_requires_login(self, client):
        assert client.put("/api/users/me/password", json={}).status_code == 401

    def test_delete_own_account(self, client, logged_in, make_game):
        game = make_game("silksong")
        client.post("/api/wishlist", json={"game_id": game.id})

        assert client.delete("/api/users/me").status_code == 204

        assert client.get("/api/users/me").status_code == 401
        assert User.query.count() == 0
        assert WishlistItem.query.count() == 0
        assert Notification.query.count() == 0


class TestAdminEndpoints:

    def test_regular_user_is_forbidden(self, client, logged_in):
        response = client.get("/api/users/admin")

        assert response.status_code == 403
        assert response.get_json()["code"] == "FORBIDDEN"

    def test_anonymous_is_unauthorized(self, client):
        assert client.get("/api/users/admin").status_code == 401

    def test_list_and_lookup(self, client, admin, make_user):
        alice = make_user("alice")

        listed = client.get("/api/users/admin").get_json()["data"]
        assert [u["username"] for u in listed] == ["root", "alice"]

        assert client.get(f"/api/users/admin/id/{alice.id}").get_json()["data"]["username"] == "alice"
        assert client.get("/api/users/admin/username/alice").get_json()["data"]["id"] == alice.id
        assert client.get("/api/users/admin/id/4242").status_code == 404
        assert client.get("/api/users/admin/username/nobody").status_code == 404

    def test_delete_user(self, client, admin, make_user):
        alice = make_user("alice")

        assert client.delete(f"/api/users/admin/{alice.id}").status_code == 204
        assert db.session.get(User, alice.id) is None
        assert client.delete(f"/api/users/admin/{alice.id}").status_code == 404

    def test_cannot_delete_self(self, client, admin):
        assert client.delete(f"/api/users/admin/{admin.id}").status_code == 403
        assert db.session.get(User, admin.id) is not None

    def test_change_role(self, client, admin, make_user):
        alice = make_user("alice")

        response = client.put(f"/api/users/admin/{alice.id}/role", json={"role": "ROLE_ADMIN"})

        assert response.status_code == 200
        assert response.get_json()["data"]["role"] == "ROLE_ADMIN"

    def test_unknown_role_is_rejected(self, client, admin, make_user):
        alice = make_user("alice")

        assert client.put(f"/api/users/admin/{alice.id}/role", json={"role": "ROLE_ROOT"}).status_code == 400

    def test_cannot_change_own_role(self, client, admin):
        assert client.put(f"/api/users/admin/{admin.id}/role", json={"role": "ROLE_USER"}).status_code == 403

    def test_admin_seeded_from_environment(self, app, client, monkeypatch):
        from release_tracker.auth import init_users

        monkeypatch.setenv("USER_ADMIN_NAME", "seeded")
        monkeypatch.setenv("USER_ADMIN_PASSWORD", "seeded-password")
        init_users(app)

        data = login(client, "seeded", "seeded-password")
        assert data["role"] == "ROLE_ADMIN"
        assert data["email"] == "admin@example.com"
        assert client.get("/api/users/admin").status_code == 200


class TestGameEndpoints:

    def test_list_games_paginated(self, client, make_game):
        for i in range(3):
            make_game(f"game-{i}", release_date=date(2024, 7, 1 + i))

        response = client.get("/api/games?per_page=2")
        data = response.get_json()

        assert response.status_code == 200
        assert [g["slug"] for g in data["data"]] == ["game-0", "game-1"]
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_more"] is True

    def test_list_games_by_status(self, client, make_game):
        make_game("upcoming")

        assert client.get("/api/games?status=released").get_json()["data"] == []
        assert len(client.get("/api/games?status=upcoming").get_json()["data"]) == 1

    def test_unknown_status_is_rejected(self, client):
        assert client.get("/api/games?status=leaked").status_code == 400

    def test_per_page_limit(self, client):
        assert client.get("/api/games?per_page=500").status_code == 400

    def test_game_detail(self, client, make_game):
        game = make_game("silksong", title="Silksong", developer="Team Cherry")
        db.session.add(PreorderLink(game_id=game.id, store_name="Steam", url="https://store.example.com/a"))
        db.session.commit()

        data = client.get(f"/api/games/{game.id}").get_json()["data"]

        assert data["title"] == "Silksong"
        assert data["developer"] == "Team Cherry"
        assert data["status"] == "UPCOMING"
        assert data["preorder_links"][0]["store_name"] == "Steam"

    def test_missing_game(self, client):
        response = client.get("/api/games/4242")

        assert response.status_code == 404
        assert response.get_json()["code"] == "NOT_FOUND"

    def test_filter_by_several_genres_and_platforms(self, client, make_game):
        action = make_game("action-game", release_date=date(2024, 7, 1))
        action.genres = [GenreRepository.find_or_create("Action")]
        action.platforms = [PlatformRepository.find_or_create("PC")]
        puzzle = make_game("puzzle-game", release_date=date(2024, 7, 2))
        puzzle.genres = [GenreRepository.find_or_create("Puzzle")]
        puzzle.platforms = [PlatformRepository.find_or_create("Nintendo Switch")]
        make_game("racing-game", release_date=date(2024, 7, 3))
        db.session.commit()

        def slugs(query):
            return [g["slug"] for g in client.get(f"/api/games?{query}").get_json()["data"]]

        assert slugs("genres=Action&genres=Puzzle") == ["action-game", "puzzle-game"]
        assert slugs("genres=Action,Puzzle") == ["action-game", "puzzle-game"]
        assert slugs("platforms=Nintendo%20Switch") == ["puzzle-game"]
        assert slugs("genres=Action&platforms=Nintendo%20Switch") == []

    def test_filter_released_after_date(self, client, make_game):
        make_game("on-the-day", release_date=date(2024, 6, 20))
        make_game("day-after", release_date=date(2024, 6, 21))

        data = client.get("/api/games?date=2024-06-20").get_json()["data"]

        assert [g["slug"] for g in data] == ["day-after"]

    def test_invalid_date_is_rejected(self, client):
        response = client.get("/api/games?date=next-week")

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"

    def test_database_error_is_reported(self, client):
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(GameRepository, "get_paged", side_effect=error):
            response = client.get("/api/games")

        assert response.status_code == 500
        assert response.get_json()["code"] == "DATABASE_ERROR"


class TestWishlistEndpoints:

    def test_requires_login(self, client):
        assert client.get("/api/wishlist").status_code == 401

    def test_add_check_list_remove(self, client, logged_in, make_game):
        game = make_game("silksong")

        assert client.post("/api/wishlist", json={"game_id": game.id}).status_code == 201
        assert client.get(f"/api/wishlist/{game.id}").get_json()["data"]["in_wishlist"] is True
        assert [g["slug"] for g in client.get("/api/wishlist").get_json()["data"]] == ["silksong"]

        assert client.delete(f"/api/wishlist/{game.id}").status_code == 204
        assert client.get(f"/api/wishlist/{game.id}").get_json()["data"]["in_wishlist"] is False

    def test_add_twice_is_conflict(self, client, logged_in, make_game):
        game = make_game("silksong")
        client.post("/api/wishlist", json={"game_id": game.id})

        assert client.post("/api/wishlist", json={"game_id": game.id}).status_code == 409

    def test_add_requires_integer_game_id(self, client, logged_in):
        assert client.post("/api/wishlist", json={"game_id": "1"}).status_code == 400

    def test_add_unknown_game(self, client, logged_in):
        assert client.post("/api/wishlist", json={"game_id": 4242}).status_code == 404

    def test_remove_missing(self, client, logged_in, make_game):
        assert client.delete(f"/api/wishlist/{make_game('silksong').id}").status_code == 404


class TestNotificationEndpoints:

    def test_inbox_flow(self, client, logged_in, make_game):
        game = make_game("silksong", title="Silksong")
        client.post("/api/wishlist", json={"game_id": game.id})

        notifications = client.get("/api/notifications").get_json()["data"]
        assert len(notifications) == 1
        assert notifications[0]["game_title"] == "Silksong"
        assert client.get("/api/notifications/unread/count").get_json()["data"]["count"] == 1

        notification_id = notifications[0]["id"]
        assert client.put(f"/api/notifications/{notification_id}/read").status_code == 204
        assert client.get("/api/notifications/unread").get_json()["data"] == []

        assert client.put(f"/api/notifications/{notification_id}/unread").status_code == 204
        assert client.put("/api/notifications/read-all").get_json()["data"]["updated"] == 1

        assert client.delete(f"/api/notifications/{notification_id}").status_code == 204
        assert client.get("/api/notifications").get_json()["data"] == []

    def test_other_users_notification_is_404(self, client, logged_in, make_user, make_game):
        stranger = make_user("stranger")
        game = make_game("silksong")
        db.session.add(Notification(user_id=stranger.id, game_id=game.id, message="theirs"))
        db.session.commit()
        notification_id = Notification.query.one().id

        assert client.put(f"/api/notifications/{notification_id}/read").status_code == 404
        assert client.delete(f"/api/notifications/{notification_id}").status_code == 404


class TestSystemEndpoints:

    def test_health_without_sync(self, client):
        data = client.get("/api/health").get_json()["data"]

        assert data["status"] == "healthy"
        assert data["last_sync"] is None

    def test_health_reports_last_sync(self, client):
        db.session.add(CatalogSyncLog(
            status=SYNC_STATUS_COMPLETED,
            started_at=datetime(2024, 6, 15, 0, 0),
            completed_at=datetime(2024, 6, 15, 0, 2),
        ))
        db.session.commit()

        last_sync = client.get("/api/health").get_json()["data"]["last_sync"]

        assert last_sync["status"] == SYNC_STATUS_COMPLETED
        assert last_sync["completed_at"] == "2024-06-15T00:02:00+00:00"

    def test_metrics(self, client):
        response = client.get("/api/metrics")

        assert response.status_code == 200
        assert b"release_tracker_games_total" in response.data
