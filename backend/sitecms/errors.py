from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from sitecms.domain.exceptions import (
    CapExceeded,
    DomainError,
    StorageError,
    UploadBatchError,
)


def _error_response(error_name, message, status_code, **extra):
    body = {
        "error": error_name,
        "message": message,
    }
    body.update(extra)
    response = jsonify(body)
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(UploadBatchError)
    def handle_upload_batch_error(error):
        current_app.logger.warning("Upload batch failed: %s (%s)", error.message, error.result.summary)
        return _error_response(
            "UploadBatchError",
            error.message,
            error.status_code,
            batch=error.result.to_dict(),
        )

    @app.errorhandler(CapExceeded)
    def handle_cap_exceeded(error):
        return _error_response("CapExceeded", error.message, error.status_code, cap=error.cap)

    @app.errorhandler(StorageError)
    def handle_storage_error(error):
        current_app.logger.error("Storage failure: %s", error.message)
        return _error_response(
            "StorageError", error.message, error.status_code, retryable=error.retryable
        )

    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        if error.status_code >= 500:
            current_app.logger.error("%s: %s", type(error).__name__, error.message)
        return _error_response(type(error).__name__, error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return _error_response(error.name, error.description, error.code)
