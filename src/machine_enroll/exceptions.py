"""Machine enrollment exceptions."""


class EnrollException(Exception):
    """Base exception for machine enrollment operations."""

    pass


class RegistryException(EnrollException):
    """Raised when the machine registry cannot be read or written."""

    pass


class ProbeException(EnrollException):
    """Raised by a connection probe that could not complete its check.

    The workflow treats this the same as a "not online" answer; it never
    escapes to the caller.
    """

    pass


class ProtectionException(EnrollException):
    """Raised when a protected password cannot be decrypted."""

    pass
