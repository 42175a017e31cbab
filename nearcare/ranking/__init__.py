from .distance import haversine_km, nearest, rank

__all__ = ["haversine_km", "rank", "nearest"]
