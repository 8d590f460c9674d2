from __future__ import annotations

import logging
import random
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple, Union

from .cells import FLAGGED, HAZARD, HIDDEN
from .difficulty import Difficulty, resolve_difficulty
from .game import Game
from .reveal import RevealStatus


logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _count(game: Game, code: str) -> int:
    return sum(row.count(code) for row in game.visible_view())


class InMemorySessions:
    """Live games keyed by user id. Nothing outlives the process."""

    def __init__(self, rng_seed: Optional[int] = None, rng_factory: Optional[Callable[[], Any]] = None) -> None:
        self.games: Dict[str, Dict[str, Any]] = {}
        self._rng_seed = rng_seed
        self._rng_factory = rng_factory
        self._lock = threading.Lock()

    def _new_rng(self):
        if self._rng_factory is not None:
            return self._rng_factory()
        return random.Random(self._rng_seed)

    def get_game(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.games.get(user_id)

    def start_game(self, user_id: str, difficulty: Union[Difficulty, int, str]) -> Dict[str, Any]:
        tier = resolve_difficulty(difficulty)
        with self._lock:
            existing = self.games.get(user_id)
            if existing and existing.get("status") == "active":
                raise ValueError("active_game_exists")
            now = _now()
            doc = {
                "game": Game(tier.config, rng=self._new_rng()),
                "difficulty": tier.label,
                "status": "active",
                "created_at": now,
                "updated_at": now,
                "finished_at": None,
                "moves_count": 0,
                "last_move": None,
            }
            self.games[user_id] = doc
        logger.info("[minefield] start user_id=%s difficulty=%s", user_id, tier.label)
        return doc

    def _require(self, user_id: str) -> Dict[str, Any]:
        game = self.games.get(user_id)
        if not game:
            raise KeyError("game_not_found")
        return game

    def _finish(self, doc: Dict[str, Any], status: str, now: datetime) -> None:
        doc["status"] = status
        doc["finished_at"] = now
        logger.info("[minefield] finished status=%s moves=%d", status, doc["moves_count"])

    def reveal(self, user_id: str, row: int, col: int) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        with self._lock:
            doc = self._require(user_id)
            game: Game = doc["game"]
            if doc["status"] != "active":
                # bounds are still enforced on finished games
                game.cell(row, col)
                move = {"action": "reveal", "row": row, "col": col, "outcome": None,
                        "hit_mine": False, "cleared_cells": 0, "status_after": doc["status"]}
                return doc, move

            outcome = game.reveal(row, col)
            now = _now()
            if outcome.cells:
                doc["moves_count"] += 1
                doc["updated_at"] = now
            if outcome.status is RevealStatus.HAZARD_HIT:
                self._finish(doc, "lost", now)
            elif game.is_won():
                self._finish(doc, "won", now)
            move = {
                "action": "reveal",
                "row": row,
                "col": col,
                "outcome": outcome.status.value,
                "hit_mine": outcome.hit_hazard,
                "cleared_cells": len(outcome.cells),
                "status_after": doc["status"],
            }
            doc["last_move"] = move
            return doc, move

    def flag(self, user_id: str, row: int, col: int) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        with self._lock:
            doc = self._require(user_id)
            game: Game = doc["game"]
            before = game.cell(row, col).content
            if doc["status"] == "active":
                game.toggle_flag(row, col)
            after = game.cell(row, col).content
            if after != before:
                now = _now()
                doc["moves_count"] += 1
                doc["updated_at"] = now
                if game.is_won():
                    self._finish(doc, "won", now)
            move = {"action": "flag", "row": row, "col": col, "flagged": after == FLAGGED,
                    "status_after": doc["status"]}
            doc["last_move"] = move
            return doc, move

    def abandon(self, user_id: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        with self._lock:
            doc = self._require(user_id)
            if doc["status"] == "active":
                self._finish(doc, "abandoned", _now())
            move = {"action": "abandon", "status_after": doc["status"]}
            return doc, move

    def to_client(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        game: Game = doc["game"]
        board = game.visible_view()
        if game.is_dead():
            solution = game.solution_view()
            for r, row in enumerate(board):
                for c, ch in enumerate(row):
                    if ch in (HIDDEN, FLAGGED) and solution[r][c] == HAZARD:
                        row[c] = HAZARD
        return {
            "difficulty": doc["difficulty"],
            "rows": game.rows,
            "cols": game.cols,
            "hazards": game.hazards,
            "status": doc["status"],
            "moves_count": doc["moves_count"],
            "flags_total": _count(game, FLAGGED),
            "revealed_total": game.rows * game.cols - _count(game, HIDDEN) - _count(game, FLAGGED),
            "board": board,
        }
