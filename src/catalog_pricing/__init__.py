"""
Catalog Pricing Package

Unit-of-measure and multi-channel pricing engine for the product form.
Converts between Piece, Pack, Case and Pallet, derives every unit's prices
from one reference unit, and assembles the multi-channel catalog payload.
"""

__version__ = "1.0.0"
