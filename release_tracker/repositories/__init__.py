"""
Repositories package

Each repository encapsulates database operations for a model:
- game_repository.py
- lookup_repository.py (genres and platforms)
- etc.

Usage:
    from release_tracker.repositories.game_repository import GameRepository
    game = GameRepository.get_by_slug("hollow-knight-silksong")
"""
