"""
Render Caching for TableView

Holds the last rendered markup of one view together with the settings
snapshot it was produced from. A lookup hits only when the current snapshot
is equal by value to the stored one.

Features:
- Value-equality invalidation (no TTL, no wall-clock state)
- Hit / miss statistics
- Can be switched off with CONFIG['performance.enable_render_cache']

One cache belongs to exactly one view; it is not shared and not locked.
"""

from typing import Any, Optional

from config import CONFIG
from logger import get_logger

logger = get_logger(__name__)


class RenderCache:
    """
    Single-entry cache of the last rendered table.
    """

    def __init__(self):
        self._settings: Any = None
        self._markup: Optional[str] = None
        self.hits = 0
        self.misses = 0

    @property
    def enabled(self) -> bool:
        return bool(CONFIG.get('performance.enable_render_cache', True))

    def lookup(self, settings: Any) -> Optional[str]:
        """
        Return the cached markup if it was rendered from settings equal to `settings`.

        Parameters:
            settings: Snapshot of the current view configuration.

        Returns:
            The cached markup, or None on a miss (no entry, changed settings, or cache disabled).
        """
        if self.enabled and self._markup is not None and self._settings == settings:
            self.hits += 1
            logger.debug("Render cache HIT")
            return self._markup

        self.misses += 1
        return None

    def store(self, settings: Any, markup: str) -> None:
        """Remember `markup` as the output for `settings`, replacing any previous entry."""
        self._settings = settings
        self._markup = markup
        logger.debug(f"Render cache SET ({len(markup)} chars)")

    def clear(self) -> None:
        self._settings = None
        self._markup = None

    def get_stats(self) -> dict:
        """
        Return a snapshot of cache usage.

        Returns:
            dict: Mapping of metrics:
                - cached (bool): Whether an entry is currently stored.
                - hits (int): Number of cache hits.
                - misses (int): Number of cache misses.
                - hit_rate (str): Hit rate formatted as a percentage string (e.g. "75.0%").
                - total_requests (int): Sum of hits and misses.
        """
        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

        return {
            'cached': self._markup is not None,
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': f"{hit_rate:.1f}%",
            'total_requests': total_requests,
        }

    def __repr__(self) -> str:
        stats = self.get_stats()
        return f"RenderCache(cached={stats['cached']}, hit_rate={stats['hit_rate']})"
