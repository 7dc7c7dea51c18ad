"""Command-line front end and settings for the bid quantity engine."""
from .config import EngineSettings, load_settings

__all__ = ["EngineSettings", "load_settings"]
