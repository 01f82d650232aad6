class HomefoodError(Exception):
    """Base for errors surfaced to the operator."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HomefoodError):
    """Missing required field, non-positive payment, empty order and the like.

    The operation is aborted before any state changes.
    """

    status_code = 400


class NotFoundError(HomefoodError):
    """A referenced customer, order, catalog item or menu is missing."""

    status_code = 404


class PersistenceError(HomefoodError):
    """The store could not be read or written. The operator retries manually."""

    status_code = 503


class AuthorizationError(HomefoodError):
    status_code = 401
