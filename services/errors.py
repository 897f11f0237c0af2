from flask import current_app, jsonify

from models import db

GENERIC_ERROR = "An error occurred, please try again."


class ValidationFailed(Exception):
    """A business rule rejected the submitted form."""

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def response(self, data=None):
        db.session.rollback()
        echoed = {k: v for k, v in (data or {}).items() if 'password' not in k}
        return jsonify({"error": self.message, "fields": self.fields, "data": echoed}), 400


def not_found(entity):
    return jsonify({"error": f"{entity} not found"}), 404


def store_failure(action):
    """Roll back the request's session and report a generic error."""
    db.session.rollback()
    current_app.logger.exception("Error while %s", action)
    return jsonify({"error": GENERIC_ERROR}), 500
