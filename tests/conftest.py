"""Root-level pytest fixtures for the envlik test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture. Tests should use these fixtures instead of raw dict configs.
"""

import pytest

from envlik.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_ohc_isotherm(make_config):
    ...     config = make_config(mode="ohc", isotherm=18)
    ...     assert config.heat_content.isotherm == 18.0
    """
    def _make(**user_overrides):
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user)
        return resolve_config(param_config, None)

    return _make
