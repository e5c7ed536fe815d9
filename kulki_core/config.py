from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from .errors import InvalidConfiguration

# Accepted aliases for JSON bodies coming from the web front end.
_CAMEL_KEYS = {
    "colorsCount": "colors_count",
    "marblesPerSpawn": "marbles_per_spawn",
    "lineLength": "line_length",
}

_ENV_KEYS = {
    "width": "KULKI_WIDTH",
    "height": "KULKI_HEIGHT",
    "colors_count": "KULKI_COLORS",
    "marbles_per_spawn": "KULKI_SPAWN",
    "line_length": "KULKI_LINE",
}


@dataclass(frozen=True)
class GameConfig:
    """Session settings, fixed for the lifetime of one game."""
    width: int = 9
    height: int = 9
    colors_count: int = 5
    marbles_per_spawn: int = 3
    line_length: int = 5

    def validate(self) -> 'GameConfig':
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidConfiguration(f"{f.name} must be a positive integer, got {value!r}")
        if self.line_length < 2:
            # Length 1 clears every spawned marble at once, so the board never fills.
            raise InvalidConfiguration(f"line_length must be at least 2, got {self.line_length}")
        if self.width * self.height <= self.marbles_per_spawn:
            raise InvalidConfiguration(
                f"a {self.width}x{self.height} board cannot hold a spawn of {self.marbles_per_spawn}"
            )
        return self

    def score_key(self) -> str:
        """Key under which high scores for this configuration are stored."""
        return f"{self.width}x{self.height}|c{self.colors_count}|s{self.marbles_per_spawn}|l{self.line_length}"

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'GameConfig':
        """Builds a config from a dict; unknown keys are ignored, missing keys use defaults."""
        names = {f.name for f in fields(cls)}
        values: Dict[str, int] = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in names:
                continue
            try:
                values[name] = int(value)
            except (TypeError, ValueError):
                raise InvalidConfiguration(f"{key} must be an integer, got {value!r}") from None
        return cls(**values).validate()

    @classmethod
    def from_env(cls) -> 'GameConfig':
        values = {name: os.environ[env] for name, env in _ENV_KEYS.items() if os.getenv(env)}
        return cls.from_mapping(values)
