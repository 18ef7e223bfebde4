"""
Game Routes - read-only catalog endpoints
"""

from datetime import date

from flask import Blueprint, request

from release_tracker.api_responses import get_int_arg, paginated_response, success_response
from release_tracker.exceptions import NotFoundException, ValidationException
from release_tracker.models.gamestatus import GameStatus
from release_tracker.repositories.game_repository import GameRepository

games_bp = Blueprint("games", __name__, url_prefix="/api")


def _get_list_arg(name):
    """Accepts both ?genres=A&genres=B and ?genres=A,B"""
    values = []
    for raw in request.args.getlist(name):
        values.extend(part.strip() for part in raw.split(",") if part.strip())
    return values or None


@games_bp.route("/games")
def list_games():
    page = get_int_arg("page", 1)
    per_page = get_int_arg("per_page", 20, maximum=100)

    status = request.args.get("status")
    if status:
        try:
            status = GameStatus(status.upper())
        except ValueError:
            raise ValidationException(f"Unknown status '{status}'")

    released_after = request.args.get("date")
    if released_after:
        try:
            released_after = date.fromisoformat(released_after)
        except ValueError:
            raise ValidationException(f"Invalid date '{released_after}', expected YYYY-MM-DD")

    genres = _get_list_arg("genres") or _get_list_arg("genre")
    platforms = _get_list_arg("platforms") or _get_list_arg("platform")

    items, total = GameRepository.get_paged(
        page,
        per_page,
        status=status,
        query_text=request.args.get("q") or request.args.get("search"),
        genres=genres,
        platforms=platforms,
        released_after=released_after,
        include_mature=request.args.get("include_mature", "false").lower() == "true",
    )
    return paginated_response([game.to_summary_dict() for game in items], total, page, per_page)


@games_bp.route("/games/<int:game_id>")
def get_game(game_id):
    game = GameRepository.get_by_id(game_id)
    if game is None:
        raise NotFoundException(f"Game not found with id: {game_id}")
    return success_response(game.to_detail_dict())
