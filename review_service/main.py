"""ASGI entry point: the application built from environment settings."""

import logging

from review_service.app import create_app

logging.basicConfig(level=logging.INFO)

app = create_app()
