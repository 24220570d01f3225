"""Build layout coordinator for multi-project builds."""

__version__ = "0.1.0"
