"""Mintas installer — fetch, place and remove the Mintas binary."""

__version__ = "0.1.0"
