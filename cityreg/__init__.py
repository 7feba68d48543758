"""cityreg -- a shared city registry over a get/set key-value substrate."""

__version__ = "0.1.0"
