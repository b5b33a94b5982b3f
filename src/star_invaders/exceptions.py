"""
Star Invaders exceptions
"""


class StarInvadersError(Exception):
    """Base class for every error raised by the game."""


class ConfigError(StarInvadersError, ValueError):
    """Raised when settings are malformed or out of range."""


class AssetError(StarInvadersError):
    """Raised when an asset exists but cannot be loaded."""
