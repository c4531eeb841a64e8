"""Thumbnail URL construction and format conversion for catalogue images."""
import re
from typing import Optional

THUMBNAIL_MODES = ('m', 'f', 's')  # centre crop, fit, stretch
_CONVERTIBLE = re.compile(r'\.(jpe?g|png|gif)(?=($|[?#]))', re.IGNORECASE)


class ImageService:
    """Builds delivery URLs for resized images.

    Resizing itself happens in the image server behind *base_url*; this
    service only encodes the requested geometry into the URL::

        <base_url>/<width>x<height>/<mode>/<image path>
    """

    def __init__(self, base_url: str = '/thumbs') -> None:
        self._base = base_url.rstrip('/')

    def get_thumbnail(self, image: Optional[str], width: int, height: int,
                      mode: str = 'm') -> str:
        """Return the thumbnail URL for *image*.

        Returns ``''`` when *image* is empty.

        Raises:
            ValueError: On non-positive dimensions or an unknown mode.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Thumbnail size must be positive, got {width}x{height}")
        if mode not in THUMBNAIL_MODES:
            raise ValueError(f"Unknown thumbnail mode {mode!r}")
        if not image:
            return ''
        path = image.strip()
        for scheme in ('http://', 'https://'):
            if path.lower().startswith(scheme):
                path = path[:len(scheme) - 3] + '/' + path[len(scheme):]
                break
        return f"{self._base}/{width}x{height}/{mode}/{path.lstrip('/')}"

    @staticmethod
    def convert_webp(url: str) -> str:
        """Swap a jpeg/png/gif extension for ``.webp``; other URLs are unchanged."""
        if not url:
            return url
        return _CONVERTIBLE.sub('.webp', url, count=1)
