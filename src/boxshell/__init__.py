"""boxshell - reproducible interactive development shells in Docker."""

__version__ = "0.3.0"
