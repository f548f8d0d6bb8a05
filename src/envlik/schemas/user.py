"""UserConfig: Forgiving, minimal user-facing configuration.

Accepts flat aliases for the options users change most often
(e.g., ISOTHERM → heat_content.isotherm, NCORES → workers.pool_size)
as well as nested overrides for advanced users. Only what is set is
applied on top of the expert defaults.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from envlik.schemas.base import EnvlikBaseModel


class UserHeatContentConfig(EnvlikBaseModel):
    """User-facing heat content config."""
    isotherm: Optional[float] = None
    heat_capacity: Optional[float] = None
    density: Optional[float] = None
    scale: Optional[float] = None
    bias: Optional[float] = None
    bathymetry_mask: Optional[bool] = None


class UserWorkerConfig(EnvlikBaseModel):
    """User-facing worker pool config."""
    pool_size: Optional[int] = None
    fetch_timeout_sec: Optional[float] = None
    failure_policy: Optional[str] = None

    @field_validator("failure_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v):
        """Normalize policy names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserDatasetConfig(EnvlikBaseModel):
    """User-facing dataset naming config."""
    filename_prefix: Optional[str] = None
    variable: Optional[str] = None
    lon: Optional[str] = None
    lat: Optional[str] = None
    depth: Optional[str] = None


class UserConfig(EnvlikBaseModel):
    """User-facing configuration schema.

    Usage
    -----
        user_cfg = UserConfig(
            mode="ohc",
            isotherm=20,
            ncores=4,
        )

        internal = resolve_config(param_cfg, user_cfg)
    """

    mode: Optional[Literal["profile", "ohc", "sst"]] = Field(None, alias="MODE")

    # Flat aliases
    focal_dim: Optional[int] = Field(None, alias="FOCAL_DIM")
    sensor_error: Optional[float] = Field(None, alias="SENSOR_ERROR")
    isotherm: Optional[float] = Field(None, alias="ISOTHERM")
    bathy: Optional[bool] = Field(None, alias="BATHY")
    ncores: Optional[int] = Field(None, alias="NCORES")
    auto_coarsen: Optional[bool] = Field(None, alias="AUTO_COARSEN")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")

    # Nested overrides (advanced users)
    heat_content: Optional[UserHeatContentConfig] = None
    workers: Optional[UserWorkerConfig] = None
    dataset: Optional[UserDatasetConfig] = None

    model_config = EnvlikBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("mode", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, v, info):
        """Modes are lowercase, log levels uppercase."""
        if isinstance(v, str):
            v = v.strip()
            return v.upper() if info.field_name == "log_level" else v.lower()
        return v

    @field_validator("sensor_error", "isotherm", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.mode is not None:
            overrides["mode"] = self.mode

        if self.focal_dim is not None:
            overrides["window"] = {"size": self.focal_dim}

        if self.sensor_error is not None:
            overrides["sensor"] = {"error_pct": self.sensor_error}

        if self.auto_coarsen is not None:
            overrides["grid"] = {"auto_coarsen": self.auto_coarsen}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        # Heat content section
        heat_content = {}
        if self.isotherm is not None:
            heat_content["isotherm"] = self.isotherm
        if self.bathy is not None:
            heat_content["bathymetry_mask"] = self.bathy
        if self.heat_content is not None:
            heat_content.update(self.heat_content.model_dump(exclude_none=True))
        if heat_content:
            overrides["heat_content"] = heat_content

        # Worker section
        workers = {}
        if self.ncores is not None:
            workers["pool_size"] = self.ncores
        if self.workers is not None:
            workers.update(self.workers.model_dump(exclude_none=True))
        if workers:
            overrides["workers"] = workers

        if self.dataset is not None:
            dataset = self.dataset.model_dump(exclude_none=True)
            if dataset:
                overrides["dataset"] = dataset

        return overrides
