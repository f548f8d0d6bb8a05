"""ParamConfig: Expert defaults for the likelihood engine.

This module defines the complete default configuration. ALL engine
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from envlik.schemas.base import EnvlikBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class WindowConfig(EnvlikBaseModel):
    """Neighborhood window used for the spatial standard deviation."""
    size: Optional[int] = Field(None, ge=3, description="Explicit odd window edge length in cells")
    extent_deg: float = Field(0.25, gt=0, description="Spatial extent approximated when size is unset")
    min_size: int = Field(3, ge=3)

    @field_validator("size")
    @classmethod
    def require_odd_size(cls, v):
        """Window must be centered on a cell."""
        if v is not None and v % 2 == 0:
            raise ValueError(f"window size must be odd, got {v}")
        return v


class SensorConfig(EnvlikBaseModel):
    """Tag sensor settings."""
    error_pct: float = Field(1.0, ge=0, lt=100, description="Percent sensor error widening SST intervals")

    @field_validator("error_pct", mode="before")
    @classmethod
    def coerce_error_to_float(cls, v):
        """Allow int or float for sensor error."""
        return float(v)


class ProfileConfig(EnvlikBaseModel):
    """Local regression used to reconstruct daily depth profiles."""
    span: float = Field(0.7, gt=0, le=1.0, description="Nearest-neighbour fraction of samples in each local fit")
    degree: int = Field(2, ge=1, le=2)


class HeatContentConfig(EnvlikBaseModel):
    """Ocean heat content (OHC) mode constants."""
    isotherm: Optional[float] = None
    heat_capacity: float = Field(3.993, gt=0, description="kJ/kg*C, heat capacity of seawater")
    density: float = Field(1025.0, gt=0, description="kg/m3, assumed density of seawater")
    scale: float = Field(10000.0, gt=0)
    bias: float = Field(0.2, ge=0, lt=1.0, description="Calibration offset subtracted from scaled OHC likelihood")
    bathymetry_mask: bool = True


class GridConfig(EnvlikBaseModel):
    """Run-wide grid geometry settings (fixed by the pre-scan)."""
    auto_coarsen: bool = True
    target_resolution_deg: float = Field(0.1, gt=0)


class WorkerConfig(EnvlikBaseModel):
    """Day-worker pool settings."""
    pool_size: Optional[int] = Field(None, ge=1, description="Defaults to available parallelism")
    fetch_timeout_sec: float = Field(300.0, gt=0)
    failure_policy: Literal["degrade", "fail_fast"] = "degrade"


class DatasetConfig(EnvlikBaseModel):
    """Variable and coordinate names for on-disk reference datasets."""
    filename_prefix: str = ""
    variable: Optional[str] = None
    lon: str = "lon"
    lat: str = "lat"
    depth: str = "depth"


class LoggingConfig(EnvlikBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(EnvlikBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg)
    """

    mode: Literal["profile", "ohc", "sst"] = "profile"
    window: WindowConfig = Field(default_factory=WindowConfig)
    sensor: SensorConfig = Field(default_factory=SensorConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    heat_content: HeatContentConfig = Field(default_factory=HeatContentConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    workers: WorkerConfig = Field(default_factory=WorkerConfig)
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
