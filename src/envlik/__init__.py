"""`envlik` - Environmental likelihood surfaces for tagged-animal geolocation.

Subpackages:
- data: Reference grid accessors and tag observation series
- likelihood: Interval matching, spatial variability, profile reconstruction
- pipeline: Alignment, day workers, orchestration and assembly
- schemas: Pydantic configuration
- contracts: Run invariants and failure kinds
"""

__version__ = "0.1.0"
