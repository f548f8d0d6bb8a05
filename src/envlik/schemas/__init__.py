"""Pydantic configuration schemas for the likelihood engine.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
"""

from envlik.schemas.resolve import resolve_config
from envlik.schemas.internal import InternalConfig
from envlik.schemas.param import ParamConfig
from envlik.schemas.user import UserConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
]
