from enum import Enum


class TransportErrorKind(Enum):
    """
    Reason a reader failed to exchange an APDU with the card.
    """

    USER_CANCEL = "user_cancel"
    """The user aborted the card request. Not reported as an error."""

    TIMEOUT = "timeout"
    """No card or no reply within the reader timeout."""

    IO = "io"
    """Any other reader or radio fault."""
