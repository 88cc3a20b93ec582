"""Engine configuration loaded from CLI flags or a JSON file."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class EngineConfig:
    """Search settings shared by a player's own decisions and its challenges."""

    depth: int = 3
    seed: Optional[int] = None
    use_transposition: bool = True
    debug_top_k: int = 3

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError(f"Search depth must be non-negative, got {self.depth}.")
        self.debug_top_k = max(1, self.debug_top_k)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "EngineConfig":
        seed = payload.get("seed")
        return cls(
            depth=int(payload.get("depth", 3)),
            seed=None if seed is None else int(seed),
            use_transposition=bool(payload.get("use_transposition", True)),
            debug_top_k=int(payload.get("debug_top_k", 3)),
        )

    @classmethod
    def from_json(cls, path: str | Path) -> "EngineConfig":
        with Path(path).open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        # Accept either a bare engine block or a file with an "engine" section.
        return cls.from_dict(payload.get("engine", payload))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
