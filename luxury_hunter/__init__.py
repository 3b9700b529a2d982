"""
Luxury Hunter - confidence fusion and decision engine for luxury goods
brand detection and authentication.
"""

__version__ = "1.0.0"
