"""propbind — reflective configuration validation and property binding."""

__version__ = "0.3.0"
