"""
SFManager - authentication and startup role resolution service.
"""

__version__ = "0.1.0"
