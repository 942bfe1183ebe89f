"""Relay websocket commands from a controller into DOM actions in browser tabs."""

__version__ = "0.1.0"
