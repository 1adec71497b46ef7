"""xcpack - package a vendored native SDK into a unified .xcframework bundle."""

__version__ = "0.1.0"
