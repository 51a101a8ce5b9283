"""Shared engine instance for the API routers."""
from ..engine import CatalogPricingEngine

engine = CatalogPricingEngine()
