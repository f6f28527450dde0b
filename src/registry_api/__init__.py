"""Registry API for versioned server descriptors."""

__version__ = "0.1.0"
