"""Best scores per theme and difficulty, kept in memory."""

import logging
from typing import Optional

from ..models.game import Difficulty, Record

logger = logging.getLogger(__name__)


class RecordsBoard:
    """Keeps the top ``capacity`` scores for every (theme, difficulty) pair.

    Theme titles are matched case-insensitively, like ``ThemeCatalog``.
    """

    def __init__(self, capacity: int = 50):
        self.capacity = capacity
        self._records: dict[tuple[str, Difficulty], list[Record]] = {}

    @staticmethod
    def _key(theme: str, difficulty: Difficulty) -> tuple[str, Difficulty]:
        return theme.lower(), Difficulty(difficulty)

    def submit(self, theme: str, difficulty: Difficulty, score: int) -> bool:
        """
        Store a finished game's score.

        Returns:
            True if the score was kept. Once a board is full a score is only
            kept when it beats the current lowest one, which it replaces.
        """
        difficulty = Difficulty(difficulty)
        entries = self._records.setdefault(self._key(theme, difficulty), [])
        record = Record(theme=theme, difficulty=difficulty, score=score)

        if len(entries) < self.capacity:
            entries.append(record)
            return True

        lowest = min(entries, key=lambda r: r.score)
        if score > lowest.score:
            entries.remove(lowest)
            entries.append(record)
            logger.debug("Replaced record %d with %d for %s/%s", lowest.score, score, theme, difficulty.value)
            return True
        return False

    def top(
        self,
        theme: str,
        difficulty: Difficulty,
        limit: Optional[int] = None,
    ) -> list[Record]:
        """Records for a theme and difficulty, best first."""
        entries = self._records.get(self._key(theme, difficulty), [])
        ranked = sorted(entries, key=lambda r: (-r.score, r.recorded_at))
        return ranked if limit is None else ranked[:limit]

    def count(self, theme: str, difficulty: Difficulty) -> int:
        return len(self._records.get(self._key(theme, difficulty), []))

    def clear(self) -> None:
        self._records.clear()
