"""Configuration for xcpack."""

from .packaging_config import PackagingConfig

__all__ = [
    "PackagingConfig",
]
