"""
Service layer for user wishlists
"""
import logging

from release_tracker.exceptions import DuplicateResourceException, NotFoundException
from release_tracker.repositories.game_repository import GameRepository
from release_tracker.repositories.user_repository import UserRepository
from release_tracker.repositories.wishlist_repository import WishlistRepository
from release_tracker.services.notification_service import NotificationService

logger = logging.getLogger("main")


class WishlistService:

    def __init__(self, notification_service=None):
        self.notification_service = notification_service or NotificationService()

    def add_item(self, user_id, game_id):
        if WishlistRepository.exists(user_id, game_id):
            raise DuplicateResourceException(
                f"Wishlist item already exists for userId: {user_id} and gameId: {game_id}"
            )

        user = UserRepository.get_by_id(user_id)
        if user is None:
            raise NotFoundException(f"User not found with id: {user_id}")
        game = GameRepository.get_by_id(game_id)
        if game is None:
            raise NotFoundException(f"Game not found with id: {game_id}")

        item = WishlistRepository.create(user_id=user.id, game_id=game.id)
        logger.info(f"User {user.username} added '{game.title}' to their wishlist")

        self.notification_service.notify_wishlist_addition(user, game)
        return item

    def remove_item(self, user_id, game_id):
        item = WishlistRepository.get(user_id, game_id)
        if item is None:
            raise NotFoundException(
                f"Wishlist item not found for userId: {user_id} and gameId: {game_id}"
            )
        WishlistRepository.delete(item)

    def get_games_for_user(self, user_id):
        if UserRepository.get_by_id(user_id) is None:
            raise NotFoundException(f"User not found with id: {user_id}")
        return WishlistRepository.get_games_by_user(user_id)

    def is_game_in_wishlist(self, user_id, game_id):
        return WishlistRepository.exists(user_id, game_id)
