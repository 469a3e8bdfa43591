"""Key management and hybrid encryption core for MLS-style group messaging."""

from .codec import Cursor
from .config import MLSSettings, clear_config_cache, get_config, set_config
from .exceptions import CodecError, DecodingError, EncodingError, MLSException

__all__ = [
    "MLSException",
    "CodecError",
    "DecodingError",
    "EncodingError",
    "Cursor",
    "MLSSettings",
    "get_config",
    "set_config",
    "clear_config_cache",
]
