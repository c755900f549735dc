"""
Google Merchant Center product feed built from a Square catalog export
"""

__version__ = "1.0.0"
