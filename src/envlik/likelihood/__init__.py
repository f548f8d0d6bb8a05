"""Likelihood computation modules.

- integrator: Gaussian interval match (shared pure function)
- variability: neighbourhood standard deviation
- profile: daily depth profile reconstruction
- combiner: surface, profile and heat content combination
- normalize: per-day normalization and stack assembly
"""

from envlik.likelihood.integrator import match_likelihood
from envlik.likelihood.variability import window_size, focal_sd, focal_sd_layers
from envlik.likelihood.profile import ProfileBounds, reconstruct_profile
from envlik.likelihood.normalize import normalize_day, assemble_stack

__all__ = [
    "match_likelihood",
    "window_size",
    "focal_sd",
    "focal_sd_layers",
    "ProfileBounds",
    "reconstruct_profile",
    "normalize_day",
    "assemble_stack",
]
