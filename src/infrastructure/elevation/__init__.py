"""Infrastructure adapters for elevation lookups.

Adapter exported for simplified imports.
"""

from .open_elevation import OpenElevationSource

__all__ = ["OpenElevationSource"]
