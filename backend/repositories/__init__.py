from .cafes import CafesRepository
from .link_places import LinkPlacesRepository
from .place_details import PlaceDetailsCache
from . import models

__all__ = ["CafesRepository", "LinkPlacesRepository", "PlaceDetailsCache", "models"]
