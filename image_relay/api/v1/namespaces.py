"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app, request, send_file
from flask_restx import Namespace, Resource

from ...application.process_image_tool import PROCESS_IMAGE_TOOL, run_process_image
from ...domain.errors import ArtifactNotFoundError, ErrorCategory, create_error_response
from .models import (
    artifact_list_response,
    error_response,
    process_request,
    process_response,
    tool_response,
)

# Pipeline failure category -> HTTP status
STATUS_BY_CATEGORY = {
    ErrorCategory.INVALID_REQUEST: 400,
    ErrorCategory.FETCH_FAILED: 422,
    ErrorCategory.TRANSFORM_FAILED: 422,
    ErrorCategory.REGISTRATION_FAILED: 500,
    ErrorCategory.INTERNAL_ERROR: 500,
}

# =============================================================================
# Images Namespace - Processing pipeline
# =============================================================================

images_ns = Namespace("images", description="Image processing operations")


@images_ns.route("/process")
class ProcessImage(Resource):
    """Run the fetch -> transform -> register pipeline"""

    @images_ns.doc("process_image")
    @images_ns.expect(process_request)
    @images_ns.response(200, "Success", process_response)
    @images_ns.response(400, "Bad Request", process_response)
    @images_ns.response(422, "Image could not be fetched or processed", process_response)
    @images_ns.response(500, "Internal Server Error", process_response)
    def post(self):
        """
        Process an image

        Downloads the image at imageUrl, applies the resize, compression and
        conversion specs and returns a temporary URL for the result. The URL
        stops working once the artifact has expired after its first download.
        """
        data = request.get_json(silent=True)

        result = run_process_image(data, current_app.processing_service)
        if result.success:
            return result.to_response(), 200

        current_app.logger.info(
            f"Processing failed ({result.error_type.value}): {result.error_message}"
        )
        return result.to_response(), STATUS_BY_CATEGORY.get(result.error_type, 500)


@images_ns.route("/tool")
class ProcessImageTool(Resource):
    """Agent tool descriptor"""

    @images_ns.doc("get_process_image_tool")
    @images_ns.response(200, "Success", tool_response)
    def get(self):
        """
        Describe the process_image tool

        Returns the name, description and JSON input schema an agent-facing
        layer advertises for this service.
        """
        return PROCESS_IMAGE_TOOL, 200


# =============================================================================
# Artifacts Namespace - Serving processed images
# =============================================================================

artifacts_ns = Namespace("artifacts", description="Processed image serving", path="/")


@artifacts_ns.route("/artifact/<string:identifier>")
@artifacts_ns.param("identifier", "The artifact identifier returned by /process")
class Artifact(Resource):
    """Processed image download"""

    @artifacts_ns.doc("get_artifact")
    @artifacts_ns.produces(["image/jpeg", "image/png", "image/webp", "image/avif", "image/tiff"])
    @artifacts_ns.response(200, "Image bytes")
    @artifacts_ns.response(404, "Artifact Not Found", error_response)
    @artifacts_ns.response(500, "Internal Server Error", error_response)
    def get(self, identifier):
        """
        Download a processed image

        The first successful download starts the expiry countdown. Unknown,
        malformed and expired identifiers all answer 404.
        """
        artifact_service = current_app.artifact_service

        try:
            served = artifact_service.open_artifact(identifier)
        except ArtifactNotFoundError:
            return create_error_response(
                ErrorCategory.ARTIFACT_NOT_FOUND,
                "Artifact not found",
                status_code=404,
            )
        except Exception as e:
            current_app.logger.exception(f"Unexpected error resolving artifact: {e}")
            return create_error_response(
                ErrorCategory.INTERNAL_ERROR,
                f"Unexpected error: {e}",
                status_code=500,
            )

        try:
            response = send_file(served.location, mimetype=served.content_type)
        except FileNotFoundError:
            artifact_service.handle_missing_file(served.identifier)
            return create_error_response(
                ErrorCategory.ARTIFACT_NOT_FOUND,
                "Artifact file vanished",
                status_code=404,
            )
        except Exception as e:
            current_app.logger.exception(f"Error sending artifact {served.identifier[:8]}: {e}")
            return create_error_response(
                ErrorCategory.INTERNAL_ERROR,
                f"Unexpected error: {e}",
                status_code=500,
            )

        response.headers["Cache-Control"] = served.cache_control
        return response


@artifacts_ns.route("/artifacts")
class ArtifactList(Resource):
    """Registered artifacts (diagnostics)"""

    @artifacts_ns.doc("list_artifacts")
    @artifacts_ns.response(200, "Success", artifact_list_response)
    def get(self):
        """
        List registered artifact identifiers

        Identifiers grant access to their images; expose this route only to
        trusted callers.
        """
        return current_app.artifact_service.list_artifacts(), 200
