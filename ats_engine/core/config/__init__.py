from .scoring import get_scoring_config, get_scoring_value, load_scoring_config
from .settings import Settings, settings

__all__ = ["Settings", "settings", "get_scoring_config", "get_scoring_value", "load_scoring_config"]
