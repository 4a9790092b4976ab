"""Display preferences stored next to the ledger."""

from enum import Enum
from typing import Optional


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_stored(cls, value: Optional[str]) -> "ThemePreference":
        """Absent or unrecognized values fall back to light."""
        try:
            return cls(value)
        except ValueError:
            return cls.LIGHT

    def toggled(self) -> "ThemePreference":
        return ThemePreference.DARK if self is ThemePreference.LIGHT else ThemePreference.LIGHT
