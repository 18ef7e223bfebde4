"""
Service layer for in-app notifications: release fan-out, wishlist
acknowledgements, and the read/unread/delete lifecycle of a user's inbox.
"""
import logging

from release_tracker.constants import RELEASE_MESSAGE, WISHLIST_ADDED_MESSAGE
from release_tracker.exceptions import NotFoundException
from release_tracker.metrics import notifications_created_total
from release_tracker.models.notification import Notification
from release_tracker.repositories.game_repository import GameRepository
from release_tracker.repositories.notification_repository import NotificationRepository
from release_tracker.repositories.wishlist_repository import WishlistRepository
from release_tracker.utils import isoformat_utc

logger = logging.getLogger("main")


class NotificationService:

    def notify_users_of_game_releases(self, game_ids):
        """
        Create one notification per (user, game) wishlist entry for the
        released games. Games and wishlist entries are each loaded in one
        query and the notifications saved in one batch. Users who disabled
        notifications are skipped.
        """
        if not game_ids:
            return []

        released_games = {game.id: game for game in GameRepository.get_all_by_ids(game_ids)}
        wishlist_items = WishlistRepository.get_by_game_ids(game_ids)

        notifications = []
        for item in wishlist_items:
            game = released_games.get(item.game_id)
            if game is None or not item.user.enable_notifications:
                continue
            notifications.append(
                self.create_notification(item.user, game, RELEASE_MESSAGE.format(title=game.title))
            )

        if notifications:
            NotificationRepository.save_all(notifications)
            notifications_created_total.labels(kind="release").inc(len(notifications))
            logger.info(f"Created {len(notifications)} release notifications for {len(released_games)} games")

        return notifications

    @staticmethod
    def create_notification(user, game, message):
        """Build an unsaved, unread notification"""
        return Notification(user=user, game=game, message=message, is_read=False)

    def notify_wishlist_addition(self, user, game):
        """Acknowledge a wishlist addition immediately, unless the user disabled notifications"""
        if user is None or game is None or not user.enable_notifications:
            return None

        notification = self.create_notification(user, game, WISHLIST_ADDED_MESSAGE.format(title=game.title))
        NotificationRepository.save(notification)
        notifications_created_total.labels(kind="wishlist").inc()
        return notification

    def get_user_notifications(self, user_id):
        return [self.to_dict(n) for n in NotificationRepository.get_all_by_user(user_id)]

    def get_unread_notifications(self, user_id):
        return [self.to_dict(n) for n in NotificationRepository.get_unread_by_user(user_id)]

    def get_unread_notification_count(self, user_id):
        return NotificationRepository.count_unread_by_user(user_id)

    def _get_owned(self, notification_id, user_id):
        # Another user's notification is reported exactly like a missing one
        notification = NotificationRepository.get_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundException(f"Notification not found with id: {notification_id}")
        return notification

    def mark_as_read(self, notification_id, user_id):
        notification = self._get_owned(notification_id, user_id)
        notification.is_read = True
        return NotificationRepository.save(notification)

    def mark_as_unread(self, notification_id, user_id):
        notification = self._get_owned(notification_id, user_id)
        notification.is_read = False
        return NotificationRepository.save(notification)

    def mark_all_as_read(self, user_id):
        unread = NotificationRepository.get_unread_by_user(user_id)
        for notification in unread:
            notification.is_read = True
        NotificationRepository.save_all(unread)
        return len(unread)

    def delete_notification(self, notification_id, user_id):
        notification = self._get_owned(notification_id, user_id)
        NotificationRepository.delete(notification)

    @staticmethod
    def to_dict(notification):
        return {
            "id": notification.id,
            "user_id": notification.user_id,
            "game_id": notification.game_id,
            "game_title": notification.game.title,
            "game_cover_image_url": notification.game.cover_image_url,
            "message": notification.message,
            "is_read": notification.is_read,
            "created_at": isoformat_utc(notification.created_at),
        }
