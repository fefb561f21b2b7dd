"""relpull — install prebuilt binaries from GitHub releases."""

__version__ = "0.1.0"
