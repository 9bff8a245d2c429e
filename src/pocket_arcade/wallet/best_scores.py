"""Per-game best-score persistence.

Scores live in one small JSON object keyed by game (``snake-best-score``,
``connect-four-wins``...). Each value is a plain integer string.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class BestScoreStore:
    """Key-value store for best scores.

    With ``path=None`` the store is memory-only. A missing, unreadable or
    corrupted file is treated as "no previous best".
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable score file {self.path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed score file {self.path}")
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write score file {self.path}: {e}")

    def has(self, key: str) -> bool:
        return self._parse(key) is not None

    def read(self, key: str, default: int = 0) -> int:
        """Stored value for ``key``, or ``default`` when absent or unparsable."""
        value = self._parse(key)
        return default if value is None else value

    def write(self, key: str, value: int) -> None:
        """Store ``value`` (last write wins)."""
        self._values[key] = str(int(value))
        self._save()
        logger.debug(f"Best score {key} = {value}")

    def submit(self, key: str, value: int, lower_is_better: bool = False) -> bool:
        """Write ``value`` only if it beats the stored best. Returns True on update."""
        current = self._parse(key)
        if current is not None:
            improved = value < current if lower_is_better else value > current
            if not improved:
                return False
        elif not lower_is_better and value <= 0:
            return False
        self.write(key, value)
        return True

    def _parse(self, key: str) -> Optional[int]:
        raw = self._values.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Corrupted best score for {key}: {raw!r}")
            return None
