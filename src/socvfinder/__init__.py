# src/socvfinder/__init__.py
"""SOCV Finder: throttled access point to the Stack Exchange question API."""

__version__ = "0.1.0"
