"""
Tests for wishlist management
"""
from unittest.mock import MagicMock

import pytest

from release_tracker.exceptions import DuplicateResourceException, NotFoundException
from release_tracker.models import Notification
from release_tracker.services.wishlist_service import WishlistService


@pytest.fixture
def service(app):
    return WishlistService()


class TestWishlistService:

    def test_add_item_sends_acknowledgement(self, service, make_user, make_game):
        user = make_user("fan")
        game = make_game("silksong", title="Silksong")

        service.add_item(user.id, game.id)

        assert service.is_game_in_wishlist(user.id, game.id) is True
        notification = Notification.query.one()
        assert notification.user_id == user.id
        assert "Silksong" in notification.message

    def test_add_duplicate_raises(self, service, make_user, make_game):
        user = make_user("fan")
        game = make_game("silksong")
        service.add_item(user.id, game.id)

        with pytest.raises(DuplicateResourceException):
            service.add_item(user.id, game.id)

    def test_add_unknown_game_raises(self, service, make_user):
        user = make_user("fan")

        with pytest.raises(NotFoundException):
            service.add_item(user.id, 4242)

    def test_add_unknown_user_raises(self, service, make_game):
        game = make_game("silksong")

        with pytest.raises(NotFoundException):
            service.add_item(4242, game.id)

    def test_notification_service_is_injectable(self, app, make_user, make_game):
        notifications = MagicMock()
        user = make_user("fan")
        game = make_game("silksong")

        WishlistService(notification_service=notifications).add_item(user.id, game.id)

        notifications.notify_wishlist_addition.assert_called_once_with(user, game)

    def test_remove_item(self, service, make_user, make_game):
        user = make_user("fan")
        game = make_game("silksong")
        service.add_item(user.id, game.id)

        service.remove_item(user.id, game.id)

        assert service.is_game_in_wishlist(user.id, game.id) is False

    def test_remove_missing_item_raises(self, service, make_user, make_game):
        with pytest.raises(NotFoundException):
            service.remove_item(make_user("fan").id, make_game("silksong").id)

    def test_games_for_user(self, service, make_user, make_game):
        user = make_user("fan")
        first = make_game("first")
        second = make_game("second")
        service.add_item(user.id, first.id)
        service.add_item(user.id, second.id)

        slugs = {game.slug for game in service.get_games_for_user(user.id)}

        assert slugs == {"first", "second"}

    def test_games_for_unknown_user_raises(self, service):
        with pytest.raises(NotFoundException):
            service.get_games_for_user(4242)
