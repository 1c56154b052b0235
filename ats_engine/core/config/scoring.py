from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .settings import settings

_PACKAGED_CONFIG = Path(__file__).resolve().with_name("scoring.yaml")


def scoring_config_path() -> Path:
    if settings.scoring_config_path:
        return Path(settings.scoring_config_path).expanduser()
    return _PACKAGED_CONFIG


@lru_cache(maxsize=4)
def load_scoring_config(path: Path) -> dict[str, Any]:
    """Parse one scoring file. Results are cached per path."""
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RuntimeError(f"Scoring config not found at '{path}'.") from exc
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")
    return parsed


def get_scoring_config() -> dict[str, Any]:
    return load_scoring_config(scoring_config_path())


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Look up a dotted key such as ``parse_health.weights.layout``; missing keys give ``default``."""
    if not path:
        return default
    node: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node
