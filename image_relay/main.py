"""
main.py

Flask server for image-relay: fetch, transform and serve images from
short-lived URLs.

Notes:
  - Processing API at /api/v1/images with Swagger docs at /api/v1/docs
  - Processed images at /artifact/<id>, removed ARTIFACT_TTL_SECONDS after first download
  - Optional Celery beat sweep: `celery -A image_relay.celery_app.celery_app worker -B`
"""

import atexit

from .app_factory import create_app
from .config.settings import AppConfig


def main() -> None:
    config = AppConfig()
    app = create_app(config)

    atexit.register(app.shutdown_services)

    app.run(host=config.host, port=config.port, debug=config.debug, use_reloader=False)


if __name__ == "__main__":
    main()
