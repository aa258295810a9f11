"""Request ledger exceptions."""

from supplyhub.services.exceptions import ConflictError, NotFoundError, ValidationError


class RequestNotFound(NotFoundError):
    """No request header exists for the location, warehouse and date."""

    pass


class InvalidRequestDate(ValidationError):
    """Request date is not in DD-MM-YYYY format."""

    pass


class RequestConflictError(ConflictError):
    """A concurrent submission for the same key (or the header counter) won."""

    pass
