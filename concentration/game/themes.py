"""Card themes and the game factory."""

from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import TypeAdapter

from ..models.game import CardColor, Difficulty, GameConfig, Theme
from .engine import ConcentrationGame


DEFAULT_THEMES = [
    Theme(
        title="Halloween",
        symbols=["🎃", "👻", "🦇", "🕷", "💀", "🍬", "🧙", "🕸"],
        card_symbol="🌙",
        card_color=CardColor(red=1.0, green=0.5, blue=0.0),
    ),
    Theme(
        title="Balloons",
        symbols=["🎈", "🎉", "🎁", "🎂", "🎊", "🪁", "🧸", "🍭"],
        card_symbol="☁",
        card_color=CardColor(red=0.2, green=0.6, blue=1.0),
    ),
]

_themes_adapter = TypeAdapter(list[Theme])


def load_themes(path: Union[str, Path]) -> list[Theme]:
    """Parse a JSON array of themes from a local file."""
    return _themes_adapter.validate_json(Path(path).read_bytes())


class ThemeCatalog:
    """Themes by title, case-insensitive. Later themes replace earlier ones."""

    def __init__(self, themes: Iterable[Theme] = ()):
        self._themes: dict[str, Theme] = {}
        for theme in themes:
            self.add(theme)

    @classmethod
    def from_settings(cls, settings) -> "ThemeCatalog":
        """Built-in themes plus any from ``settings.themes_file``."""
        catalog = cls(DEFAULT_THEMES)
        if settings.themes_file:
            for theme in load_themes(settings.themes_file):
                catalog.add(theme)
        return catalog

    def add(self, theme: Theme) -> None:
        self._themes[theme.title.lower()] = theme

    def get(self, title: str) -> Optional[Theme]:
        return self._themes.get(title.lower())

    def all(self) -> list[Theme]:
        return list(self._themes.values())

    @property
    def default(self) -> Theme:
        if not self._themes:
            raise LookupError("No themes configured")
        return next(iter(self._themes.values()))

    def __len__(self) -> int:
        return len(self._themes)


def make_game(
    theme: Theme,
    difficulty: Difficulty,
    config: Optional[GameConfig] = None,
    **kwargs,
) -> ConcentrationGame:
    """Build a game from the first ``config.max_symbols`` symbols of a theme."""
    config = config or GameConfig()
    symbols = theme.symbols[: config.max_symbols]
    return ConcentrationGame(symbols, difficulty, config=config, **kwargs)
