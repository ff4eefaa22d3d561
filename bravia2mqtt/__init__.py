"""MQTT host runtime for the Bravia platform."""

from bravia_tvos import __version__

__all__ = ["__version__"]
