"""Services package: expose all concrete services from one import."""
from .category_service import CategoryService
from .option_service import OptionService
from .game_service import GameService
from .image_service import ImageService
from .listing_service import CategoryListingService

__all__ = [
    'CategoryService',
    'OptionService',
    'GameService',
    'ImageService',
    'CategoryListingService',
]
