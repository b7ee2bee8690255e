class FairAssignmentError(Exception):
    """Base class for recoverable data errors reported back to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateNameError(FairAssignmentError):
    """Raised when an add or rename would collide with an existing unique name."""

    pass


class EmptyFieldError(FairAssignmentError):
    """Raised when a required name is blank or a capacity is not a positive integer."""

    pass


class NotFoundError(FairAssignmentError):
    """Raised when the target of a rename, remove or preference edit does not exist."""

    pass


class EditLockedError(FairAssignmentError):
    """Raised when a command arrives while another row is in edit mode."""

    pass
