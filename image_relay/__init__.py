"""
image-relay

Fetches remote images, transforms them and serves the result at short-lived URLs.
"""

__version__ = "1.0.0"
