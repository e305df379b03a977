"""Best-score storage collaborators.

The session only ever talks to the ``BestScoreStore`` protocol. Storage
problems are logged and never interrupt play: the best score simply lives in
memory for the rest of the process.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)


class BestScoreStore(Protocol):
    def load_best_score(self) -> int: ...

    def store_best_score(self, score: int) -> None: ...

    def clear_best_score(self) -> None: ...


class InMemoryBestScoreStore:
    def __init__(self, initial: int = 0) -> None:
        self.value = max(0, int(initial))

    def load_best_score(self) -> int:
        return self.value

    def store_best_score(self, score: int) -> None:
        self.value = int(score)

    def clear_best_score(self) -> None:
        self.value = 0


class JsonBestScoreStore:
    """Keeps ``{"best_score": <int>}`` in a small JSON file."""

    key = "best_score"

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load_best_score(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            value = int(data[self.key])
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning("Ignoring unreadable best score file %s: %s", self.path, e)
            return 0
        return max(0, value)

    def store_best_score(self, score: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({self.key: int(score)}), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not store best score to %s: %s", self.path, e)

    def clear_best_score(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not clear best score file %s: %s", self.path, e)
