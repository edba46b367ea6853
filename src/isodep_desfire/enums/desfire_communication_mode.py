from enum import Enum


class DESFireCommunicationMode(Enum):
    """
    Communication mode byte stored with a file when it is created.

    This package always transfers file data in plain, the mode only tells the card
    what to enforce for other readers.
    """

    PLAIN = 0x00
    """Data is transferred in plain"""

    CMAC = 0x01
    """Data is transferred in plain and secured by a MAC"""

    ENCRYPTED = 0x03
    """Data is fully enciphered with the session key"""
