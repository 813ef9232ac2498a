"""
Utility modules for the PayLIVE connector
"""
from .config_loader import ConfigurationError, PayliveSettings, load_paylive_settings

__all__ = [
    'ConfigurationError',
    'PayliveSettings',
    'load_paylive_settings',
]
