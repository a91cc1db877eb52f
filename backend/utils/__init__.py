"""
Utilities package.

Provides helper functions used by core algorithms.

Modules:
    geo: Geographic distances and unit conversions (kilometers, meters)
"""
