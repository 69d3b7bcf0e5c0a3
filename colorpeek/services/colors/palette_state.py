"""
Stateful palette wrapper for reactive consumers.

Tracks one extraction lifecycle as IDLE -> PENDING -> SETTLED, exposing the
last palette, the loading flag and the last error message.
"""

from enum import Enum
from typing import Awaitable, Callable, List, Optional

from PIL import Image

from .extract_api import get_color_palette
from .extraction import DEFAULT_K
from .ranking import PaletteEntry
from colorpeek.services.acquisition import AcquisitionError

DEFAULT_ERROR_MESSAGE = "Failed to extract colors"

Extractor = Callable[..., Awaitable[List[PaletteEntry]]]


class PaletteStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED = "settled"


class ColorPaletteState:
    """Loading/error/data holder driven by the async palette facade."""

    def __init__(self, extractor: Optional[Extractor] = None):
        self._extractor = extractor or get_color_palette
        self.colors: Optional[List[PaletteEntry]] = None
        self.loading = False
        self.error: Optional[str] = None
        self.status = PaletteStatus.IDLE

    @property
    def succeeded(self) -> bool:
        return self.status is PaletteStatus.SETTLED and self.error is None

    async def extract(self, src: Optional[str] = None,
                      image: Optional[Image.Image] = None,
                      k: int = DEFAULT_K) -> Optional[List[PaletteEntry]]:
        """
        Run one extraction and record its outcome.

        A failure keeps the previously extracted colors and stores the error
        message instead of raising.
        """
        self.loading = True
        self.error = None
        self.status = PaletteStatus.PENDING
        try:
            self.colors = await self._extractor(src=src, image=image, k=k)
        except (AcquisitionError, ValueError) as e:
            self.error = str(e) or DEFAULT_ERROR_MESSAGE
        finally:
            self.loading = False
            self.status = PaletteStatus.SETTLED
        return self.colors
