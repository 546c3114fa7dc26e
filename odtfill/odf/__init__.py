"""
OpenDocument container layer: manifest, images and the package-level fill.
"""
