"""
API v1 - image-relay REST API

Versioned processing endpoints with OpenAPI/Swagger documentation, plus the
unversioned artifact routes the processed-image URLs point at.
"""

import os

from flask import Blueprint
from flask_restx import Api

# Get API version from environment
API_VERSION = os.getenv("API_VERSION", "v1")

# No url_prefix: artifact URLs live at /artifact/<id>, processing under /api/<version>
api_v1_bp = Blueprint("api_v1", __name__)

api = Api(
    api_v1_bp,
    version="1.0",
    title="image-relay API",
    description="Fetch, resize, compress and convert images, served from short-lived URLs",
    doc=f"/api/{API_VERSION}/docs",  # Swagger UI will be available at /api/v1/docs
    license="MIT",
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import artifacts_ns, images_ns  # noqa: E402

# Register namespaces
api.add_namespace(images_ns, path=f"/api/{API_VERSION}/images")
api.add_namespace(artifacts_ns)
