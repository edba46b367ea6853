import logging

# Try importing pyscard
try:
    from smartcard.CardRequest import CardRequest
    from smartcard.CardType import AnyCardType
    from smartcard.Exceptions import CardConnectionException, CardRequestTimeoutException
    from smartcard.pcsc.PCSCCardConnection import translateprotocolheader
    from smartcard.scard import SCARD_E_CANCELLED, SCARD_E_TIMEOUT, SCardGetErrorMessage, SCardTransmit
except ImportError:
    _has_pyscard = False
else:
    _has_pyscard = True

from ..defaults import CARD_REQUEST_TIMEOUT
from ..enums import TransportErrorKind
from ..exceptions import TransportError
from .base import Device, Session

logger = logging.getLogger(__name__)


def _error_kind(hresult: int) -> TransportErrorKind:
    if hresult == SCARD_E_TIMEOUT:
        return TransportErrorKind.TIMEOUT
    elif hresult == SCARD_E_CANCELLED:
        return TransportErrorKind.USER_CANCEL
    return TransportErrorKind.IO


class PCSCDevice(Device):
    """DESFire protocol wrapper for pyscard interface."""

    def __init__(self, card_connection):
        """
        :card_connection: :py:class:`smartcard.pcsc.PCSCCardConnection.PCSCCardConnection` instance.
        Call ``card_connection.connect()`` before calling any DESFire APIs.
        """

        if not _has_pyscard:
            raise ImportError("pyscard is required for using PCSCDevice")

        self.card_connection = card_connection

    def transceive(self, bytes: list[int]) -> list[int]:
        """
        Send in APDU request and wait for the response.

        Args:
            bytes (list[int]): Outgoing bytes as list of bytes or byte array

        Raises:
            TransportError: if the connection is closed or the reader reports an error

        Returns:
            list[int]: List of bytes or byte array from the device.
        """
        if not self.card_connection.hcard:
            raise TransportError(f"Tried to transmit to non-open connection: {self.card_connection}")

        protocol = self.card_connection.getProtocol()
        pcscprotocolheader = translateprotocolheader(protocol)

        # http://pyscard.sourceforge.net/epydoc/smartcard.scard.scard-module.html#SCardTransmit
        hresult, response = SCardTransmit(self.card_connection.hcard, pcscprotocolheader, bytes)

        if hresult != 0:
            raise TransportError(
                f"Failed to transmit with protocol {str(pcscprotocolheader)}. " + SCardGetErrorMessage(hresult),
                _error_kind(hresult),
            )
        return list(response)


class PCSCSession(Session):
    """
    Waits for a card on any PC/SC reader and opens a connection to it.
    """

    def __init__(self, timeout: int = CARD_REQUEST_TIMEOUT):
        if not _has_pyscard:
            raise ImportError("pyscard is required for using PCSCSession")

        self.timeout = timeout
        self.connection = None

    def acquire(self) -> PCSCDevice:
        cardrequest = CardRequest(timeout=self.timeout, cardType=AnyCardType())
        logger.info("Waiting for DESFire tag...")

        try:
            cardservice = cardrequest.waitforcard()
        except CardRequestTimeoutException as ex:
            raise TransportError("No tag detected within the timeout.", TransportErrorKind.TIMEOUT) from ex

        try:
            cardservice.connection.connect()
        except CardConnectionException as ex:
            raise TransportError(f"Could not connect to tag: {ex}") from ex

        self.connection = cardservice.connection
        logger.info(f"Connected to tag on {self.connection.getReader()}")
        return PCSCDevice(self.connection.component)

    def release(self) -> None:
        if self.connection is None:
            logger.debug("No open connection, nothing to release")
            return

        connection, self.connection = self.connection, None
        try:
            connection.disconnect()
        except CardConnectionException as ex:
            # The card may already be gone
            logger.warning(f"Failed to disconnect from tag: {ex}")
