import logging

from .devices.base import Device
from .enums import DESFireCommand
from .exceptions import ShortResponseError
from .log import TransactionLog
from .schemas import Apdu, ApduResponse
from .util import to_hex_string

logger = logging.getLogger(__name__)


def wrap_command(command: DESFireCommand, data: list[int] | None = None) -> Apdu:
    """
    Wrap a DESFire native command into an ISO 7816-4 APDU (`90 <cmd> 00 00 [Lc data] 00`).
    """
    return Apdu(ins=command.value, data=data, le=0x00)


def build_apdu(apdu: Apdu) -> list[int]:
    """
    Serialize a command APDU: CLA, INS, P1, P2, then Lc and data if data is present, then Le if requested.
    """
    result = [apdu.cla, apdu.ins, apdu.p1, apdu.p2]
    if apdu.data:
        result += [apdu.lc] + list(apdu.data)
    if apdu.le is not None:
        result += [apdu.le]
    return result


def parse_response(raw: list[int]) -> ApduResponse:
    """
    Split a raw card reply into payload and the trailing status word.

    Raises:
        ShortResponseError: if the reply has less than two bytes
    """
    if len(raw) < 2:
        logger.error(f"Received short response: {to_hex_string(raw)}")
        raise ShortResponseError(f"Response is too short to carry a status word: {to_hex_string(raw)}", list(raw))
    return ApduResponse(status_word=list(raw[-2:]), payload=list(raw[:-2]))


def is_success(response: ApduResponse) -> bool:
    """
    True if the status word belongs to the DESFire native family (`91 xx`).
    """
    return response.is_success


def exchange(device: Device, apdu: Apdu, log: TransactionLog | None = None, label: str | None = None) -> ApduResponse:
    """
    Send one APDU to the card and parse its reply.

    Args:
        device (Device): Transport used to talk to the card.
        apdu (Apdu): Command to send.
        log (TransactionLog | None, optional): Transaction log that receives the raw reply.
        label (str | None, optional): Name of the step for the transaction log.

    Raises:
        TransportError: raised by the device on I/O faults
        ShortResponseError: if the reply has less than two bytes
    """
    raw_cmd = build_apdu(apdu)
    logger.debug("Running APDU command, sending: %s", to_hex_string(raw_cmd, " "))
    resp = list(device.transceive(raw_cmd))
    logger.debug("Received APDU response: %s", to_hex_string(resp, " "))

    if log is not None:
        log.info(label or f"Command {apdu.ins:02X}", to_hex_string(resp))

    return parse_response(resp)
