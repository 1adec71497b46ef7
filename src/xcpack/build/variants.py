"""Platform variants the unified bundle is built for."""

from enum import Enum
from typing import List, Tuple


class PlatformVariant(Enum):
    """Target configuration for a from-source build.

    The value doubles as the name of the variant's build subdirectory.
    """

    MACOS = "macos"
    MAC_CATALYST = "maccatalyst"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def selector_args(self) -> Tuple[str, ...]:
        """xcodebuild arguments that select this variant."""
        return _SELECTORS[self]


_LABELS = {
    PlatformVariant.MACOS: "macOS",
    PlatformVariant.MAC_CATALYST: "Mac Catalyst",
}

_SELECTORS = {
    PlatformVariant.MACOS: ("-sdk", "macosx"),
    PlatformVariant.MAC_CATALYST: ("-destination", "platform=macOS,variant=Mac Catalyst"),
}

DEFAULT_VARIANTS: List[PlatformVariant] = [PlatformVariant.MACOS, PlatformVariant.MAC_CATALYST]
