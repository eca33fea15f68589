"""Blogsmith - turn videos and notes into blog articles."""

__version__ = "0.1.0"
