"""Data access modules.

- field: GridField container for one day's reference values
- accessor: in-memory and NetCDF directory reference accessors
- observations: tag observation series
"""

from envlik.data.field import GridField
from envlik.data.accessor import ReferenceAccessor, InMemoryAccessor, NetcdfDirectoryAccessor
from envlik.data.observations import TagObservations

__all__ = [
    "GridField",
    "ReferenceAccessor",
    "InMemoryAccessor",
    "NetcdfDirectoryAccessor",
    "TagObservations",
]
