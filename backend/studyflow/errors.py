# Error taxonomy shared by the managers and the HTTP layer


class StudyflowError(Exception):
    """Base class for failures that map onto an HTTP status code."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message}


class Unauthorized(StudyflowError):
    status_code = 401
    default_message = 'Unauthorized'


class NotFound(StudyflowError):
    status_code = 404
    default_message = 'Not found'


class Conflict(StudyflowError):
    status_code = 409
    default_message = 'Conflict'


class ValidationError(StudyflowError):
    """Malformed input. Carries field-level detail: {field: reason}."""

    status_code = 400
    default_message = 'Validation error'

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self):
        return {'message': self.message, 'errors': self.errors}


class DecodeError(StudyflowError):
    # Never surfaced with details; the handler answers a generic 500.
    status_code = 500
    default_message = 'Stored secret could not be decoded'

    def to_dict(self):
        return {'message': StudyflowError.default_message}
