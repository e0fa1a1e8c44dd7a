"""Selection sets and their shareable encoding.

A selection is compared as a set, but keeps insertion order so the share
parameter round-trips in the order the user picked upgrades.
"""

import logging
from typing import Iterable, Iterator, Mapping, Optional

from build_planner.models.upgrade import Preset
from build_planner.utils.converters import split_csv

logger = logging.getLogger(__name__)


def _clean_key(key: object) -> str:
    """Stripped key, or "" for anything that is not a string."""
    return key.strip() if isinstance(key, str) else ""


class SelectionSet:
    """Caller-owned, duplicate-free collection of upgrade keys."""

    def __init__(self, keys: Iterable[str] = ()):
        self._keys: dict[str, None] = {}
        for key in keys:
            self.add(key)

    def add(self, key: str) -> bool:
        """Add a key. Returns False when it was already present or not a key."""
        key = _clean_key(key)
        if not key or key in self._keys:
            return False
        self._keys[key] = None
        return True

    def remove(self, key: str) -> bool:
        """Remove a key. Returns False when it was absent."""
        key = _clean_key(key)
        if not key or key not in self._keys:
            return False
        del self._keys[key]
        return True

    def toggle(self, key: str) -> bool:
        """Flip membership; returns True if the key is now selected."""
        if _clean_key(key) in self._keys:
            self.remove(key)
            return False
        return self.add(key)

    def replace(self, keys: Iterable[str]) -> None:
        """Swap the whole selection, as loading a preset does."""
        self._keys.clear()
        for key in keys:
            self.add(key)

    def clear(self) -> None:
        self._keys.clear()

    def copy(self) -> "SelectionSet":
        return SelectionSet(self._keys)

    def to_list(self) -> list[str]:
        return list(self._keys)

    def to_param(self) -> str:
        """Comma-separated keys in insertion order, for share links."""
        return ",".join(self._keys)

    @classmethod
    def from_param(cls, text: Optional[str]) -> "SelectionSet":
        return cls(split_csv(text))

    def __contains__(self, key: object) -> bool:
        return _clean_key(key) in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SelectionSet):
            return self._keys.keys() == other._keys.keys()
        return NotImplemented

    def __repr__(self) -> str:
        return f"SelectionSet({self.to_list()!r})"


def load_preset(presets: Mapping[str, Preset], key: str) -> Optional[SelectionSet]:
    """Selection for a named preset, or None if the preset is unknown."""
    preset = presets.get(key)
    if preset is None:
        return None
    return SelectionSet(preset.upgrades)


def selection_from_query(
    presets: Mapping[str, Preset],
    upgrades: Optional[str] = None,
    package: Optional[str] = None,
) -> SelectionSet:
    """Rebuild a selection from share-link parameters.

    An explicit ``upgrades`` list wins over a ``package`` preset; an unknown
    package yields an empty selection.
    """
    if upgrades:
        return SelectionSet.from_param(upgrades)
    if package:
        selection = load_preset(presets, package.strip())
        if selection is not None:
            return selection
        logger.debug(f"Unknown preset in share link: {package}")
    return SelectionSet()
