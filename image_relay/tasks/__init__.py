"""
Celery Tasks

Task modules are listed in celery_app.conf.imports and loaded by the worker,
so importing this package does not build an application.
"""
