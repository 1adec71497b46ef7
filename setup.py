"""
Setup file.
"""

from setuptools import setup

KEYWORDS = "xcframework xcodebuild sdk packaging macos catalyst submodule"


if __name__ == "__main__":
    setup(
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        include_package_data=True)
