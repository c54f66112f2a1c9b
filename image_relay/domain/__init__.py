"""
Domain layer: artifacts, processing requests, errors and events.
"""
