"""Theme generator: prompt → theme, copy, images and page fragments"""

__version__ = "0.1.0"
