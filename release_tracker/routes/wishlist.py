"""
Wishlist Routes - endpoints to manage the logged in user's wishlist
"""

from flask import Blueprint
from flask_login import current_user, login_required

from release_tracker.api_responses import get_json_body, success_response
from release_tracker.exceptions import ValidationException
from release_tracker.services.wishlist_service import WishlistService

wishlist_bp = Blueprint("wishlist", __name__, url_prefix="/api")


@wishlist_bp.route("/wishlist")
@login_required
def get_wishlist():
    games = WishlistService().get_games_for_user(current_user.id)
    return success_response([game.to_summary_dict() for game in games])


@wishlist_bp.route("/wishlist", methods=["POST"])
@login_required
def add_to_wishlist():
    data = get_json_body()
    game_id = data.get("game_id")
    if isinstance(game_id, bool) or not isinstance(game_id, int):
        raise ValidationException("game_id is required and must be an integer")

    WishlistService().add_item(current_user.id, game_id)
    return success_response({"user_id": current_user.id, "game_id": game_id}, status_code=201)


@wishlist_bp.route("/wishlist/<int:game_id>")
@login_required
def wishlist_contains(game_id):
    return success_response({"in_wishlist": WishlistService().is_game_in_wishlist(current_user.id, game_id)})


@wishlist_bp.route("/wishlist/<int:game_id>", methods=["DELETE"])
@login_required
def remove_from_wishlist(game_id):
    WishlistService().remove_item(current_user.id, game_id)
    return "", 204
