"""Error handlers for the application.

Every response of the broker API is JSON, including framework-level errors
raised before a route handler runs.
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Render 404, 405, 400, ... as ``{"description": ...}``."""
        response = jsonify({"description": error.description})
        response.status_code = error.code or 500
        return response

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        if isinstance(error, HTTPException):
            return http_error(error)

        # ALWAYS log the full error, the body only carries the message
        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        return jsonify({"description": str(error)}), 500
