"""
Landscape Calculator Package

Pricing and delivery-time estimation for custom Minecraft landscape maps.
Resolves a quote using Area → Base Price → Features pipeline with an optional
adjustable-delivery model.
"""

__version__ = "1.0.0"
