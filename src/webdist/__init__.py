"""Build and serve a content-hashed, precompressed static frontend."""

__version__ = "0.1.0"
