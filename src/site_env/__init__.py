"""Environment variable resolution for deploy-platform sites."""

__version__ = "0.1.0"
