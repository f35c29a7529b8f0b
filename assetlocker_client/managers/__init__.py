"""
AssetLocker Client - Managers Package

Contains manager classes for configuration, identity and version control.

Author: AssetLocker Project
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG, CONFIG_FILENAME
from .identity_provider import IdentityProvider
from .git_provider import GitProvider, parse_porcelain_paths

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG',
    'CONFIG_FILENAME',
    'IdentityProvider',
    'GitProvider',
    'parse_porcelain_paths'
]
