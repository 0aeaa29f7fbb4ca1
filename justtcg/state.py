"""Update-baseline tracker — persists per-game ``last_updated`` stamps to JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = "./state/justtcg-baselines.json"


@dataclass
class GameBaseline:
    """Last ``last_updated`` value seen for one game."""

    game_id: str
    last_updated: int  # epoch seconds, as reported by /games
    checked_at: Optional[str] = None  # ISO timestamp of the poll that stored it


class BaselineTracker:
    """Keeps the update baselines used by the poller, backed by a JSON file."""

    def __init__(self, state_file: str = DEFAULT_STATE_FILE) -> None:
        self._path = Path(state_file)
        self._baselines: Optional[Dict[str, GameBaseline]] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def baselines(self) -> Dict[str, GameBaseline]:
        if self._baselines is None:
            self._baselines = self._load()
        return self._baselines

    def get(self, game_id: str) -> Optional[int]:
        baseline = self.baselines.get(game_id)
        return baseline.last_updated if baseline else None

    def set(self, game_id: str, last_updated: int) -> None:
        self.baselines[game_id] = GameBaseline(
            game_id=game_id,
            last_updated=int(last_updated),
            checked_at=datetime.now(timezone.utc).isoformat(),
        )

    def save(self) -> None:
        """Persist current baselines to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "games": {
                gid: {"last_updated": b.last_updated, "checked_at": b.checked_at}
                for gid, b in self.baselines.items()
            }
        }
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Baselines saved to %s", self._path)

    def delete(self) -> None:
        """Remove the state file and forget all baselines."""
        if self._path.exists():
            self._path.unlink()
            logger.info("Deleted state file %s", self._path)
        self._baselines = {}

    def summary(self) -> Dict[str, Any]:
        return {
            "games_tracked": len(self.baselines),
            "games": {
                gid: {"last_updated": b.last_updated, "checked_at": b.checked_at}
                for gid, b in sorted(self.baselines.items())
            },
        }

    def _load(self) -> Dict[str, GameBaseline]:
        if not self._path.exists():
            logger.info("No state file at %s, starting fresh", self._path)
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return {
                gid: GameBaseline(
                    game_id=gid,
                    last_updated=int(entry["last_updated"]),
                    checked_at=entry.get("checked_at"),
                )
                for gid, entry in raw.get("games", {}).items()
            }
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Corrupt state file %s: %s, starting fresh", self._path, exc)
            return {}
