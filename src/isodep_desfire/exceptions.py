from .enums import TransportErrorKind


class DESFireException(Exception):
    """Base exception for all DESFire exceptions."""

    pass


class TransportError(DESFireException):
    """The reader could not deliver a command or did not return a reply.
    The ``kind`` tells user cancellation and timeouts apart from other I/O faults.
    """

    def __init__(self, msg, kind: TransportErrorKind = TransportErrorKind.IO):
        super().__init__(msg)
        self.kind = kind


class ShortResponseError(DESFireException):
    """The card reply is shorter than the two status word bytes."""

    def __init__(self, msg, raw: list[int]):
        super().__init__(msg)
        self.raw = raw


class InvalidBlockLengthError(DESFireException):
    """Cipher input is not a multiple of the DES block size."""

    pass


class DecryptionError(DESFireException):
    """A challenge received from the card could not be deciphered."""

    pass


class DESFireCommunicationError(DESFireException):
    """Outgoing DESFire command received a non-OK reply.
    The exception message is human readable translation of the error code if available.
    The ``status_code`` carries the raw status word.
    """

    def __init__(self, msg, status_code):
        super().__init__(msg)
        self.status_code = status_code


class DESFireAuthException(DESFireException):
    """Exception raised when an authentication fails."""

    pass


class AuthenticationRejectedError(DESFireAuthException):
    """The card answered the handshake with a fault status (e.g. ``91 AE``)."""

    def __init__(self, msg, status_word: list[int]):
        super().__init__(msg)
        self.status_word = status_word


class AuthenticationMismatchError(DESFireAuthException):
    """RndA returned by the card does not match the one that was sent."""

    pass
