"""
Error types raised by the service layer.

Every error carries the HTTP status it maps to; the app-level handler
renders them as {"message": ...}.
"""


class ApiError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message}


class BadRequest(ApiError):
    status_code = 400
    default_message = 'Bad request'


class DuplicateRegistration(BadRequest):
    default_message = 'Already registered for this event'


class NotFound(ApiError):
    status_code = 404
    default_message = 'Not found'


class EventNotFound(NotFound):
    default_message = 'Event not found for this registration'


class Unauthorized(ApiError):
    status_code = 401
    default_message = 'Not authorized'


class InvalidCredential(Unauthorized):
    # Same message whether the code never existed or was malformed
    default_message = 'Invalid QR code'


class StorageError(ApiError):
    default_message = 'Database error'


class ImageUploadError(ApiError):
    default_message = 'Error uploading image'


class EmailDeliveryError(ApiError):
    default_message = 'Email could not be sent. Please try again later.'
