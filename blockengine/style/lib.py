"""Style context: the (device, orientation, pseudo) coordinates of a value."""

from __future__ import annotations

from dataclasses import dataclass

from blockengine.config import get_style_defaults


@dataclass(frozen=True)
class StyleContext:
    """Coordinates of one slot in a StyleTree.

    Example:
        >>> StyleContext("mobile", "all", "hover").as_path()
        ('mobile', 'all', 'hover')
    """

    device: str
    orientation: str
    pseudo: str

    @classmethod
    def defaults(cls) -> StyleContext:
        """Context built from BLOCKENGINE_DEFAULT_DEVICE/ORIENTATION/PSEUDO."""
        device, orientation, pseudo = get_style_defaults()
        return cls(device, orientation, pseudo)

    def as_path(self) -> tuple[str, str, str]:
        return (self.device, self.orientation, self.pseudo)


def get_default_style_context() -> StyleContext:
    return StyleContext.defaults()


__all__ = [
    "StyleContext",
    "get_default_style_context",
]
