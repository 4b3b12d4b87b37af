# storefront_ops/utils/geo.py
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from storefront_ops.config import config

class Coordinate(NamedTuple):
    latitude: float
    longitude: float

def calculate_distance(lat1: float, long1: float, lat2: float, long2: float) -> float:
    """Euclidean distance between two latitude/longitude pairs.
    
    The coordinate plane is treated as flat; units are those of the inputs.
    """
    return float(np.sqrt((lat1 - lat2) ** 2 + (long1 - long2) ** 2))

def find_nearby(origin: Coordinate, stores: Sequence, radius: Optional[float] = None) -> List:
    """Filter stores to those within ``radius`` of ``origin``.
    
    Args:
        origin: Point to measure from
        stores: Objects exposing ``latitude`` and ``longitude``
        radius: Inclusive search radius (defaults to BUSINESS_RULES.search_radius)
        
    Returns:
        Matching stores in their input order; empty list if none match
    """
    if radius is None:
        radius = config.business_rules['search_radius']
    
    stores = list(stores)
    if not stores:
        return []
    
    points = np.array([[s.latitude, s.longitude] for s in stores], dtype=float)
    deltas = points - np.array([origin[0], origin[1]], dtype=float)
    distances = np.sqrt(np.sum(deltas ** 2, axis=1))
    
    return [store for store, distance in zip(stores, distances) if distance <= radius]
