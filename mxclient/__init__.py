"""Client library for the Matrix Client-Server API: requests, sync loop, rooms and user ID helpers."""

__version__ = "0.1.0"