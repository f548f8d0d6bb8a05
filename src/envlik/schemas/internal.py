"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and frozen. Optional fields here are optional by meaning
(e.g. an unset isotherm means "derive it per day"), never by omission.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict
from envlik.schemas.base import EnvlikBaseModel


class InternalWindowConfig(EnvlikBaseModel):
    """Runtime window configuration."""
    size: Optional[int]
    extent_deg: float
    min_size: int


class InternalSensorConfig(EnvlikBaseModel):
    """Runtime sensor configuration."""
    error_pct: float


class InternalProfileConfig(EnvlikBaseModel):
    """Runtime profile regression configuration."""
    span: float
    degree: int


class InternalHeatContentConfig(EnvlikBaseModel):
    """Runtime heat content configuration."""
    isotherm: Optional[float]
    heat_capacity: float
    density: float
    scale: float
    bias: float = Field(ge=0, lt=1.0)
    bathymetry_mask: bool


class InternalGridConfig(EnvlikBaseModel):
    """Runtime grid geometry configuration."""
    auto_coarsen: bool
    target_resolution_deg: float


class InternalWorkerConfig(EnvlikBaseModel):
    """Runtime worker pool configuration (pool_size always resolved)."""
    pool_size: int = Field(ge=1)
    fetch_timeout_sec: float = Field(gt=0)
    failure_policy: Literal["degrade", "fail_fast"]


class InternalDatasetConfig(EnvlikBaseModel):
    """Runtime dataset naming configuration."""
    filename_prefix: str
    variable: Optional[str]
    lon: str
    lat: str
    depth: str


class InternalLoggingConfig(EnvlikBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_file: Optional[str]


class InternalConfig(EnvlikBaseModel):
    """Authoritative runtime configuration.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.bias = config.heat_content.bias  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    mode: Literal["profile", "ohc", "sst"]
    window: InternalWindowConfig
    sensor: InternalSensorConfig
    profile: InternalProfileConfig
    heat_content: InternalHeatContentConfig
    grid: InternalGridConfig
    workers: InternalWorkerConfig
    dataset: InternalDatasetConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
