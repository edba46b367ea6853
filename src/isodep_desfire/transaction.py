"""
Card transactions as performed by a host application: authenticate, write the record and read it back.

Each flow takes a `DESFire` object and is usually run through `run_transaction`, which acquires the card,
applies the error policy and always releases the card again:

- user cancellation is not an error and is ignored silently
- timeouts are logged as a warning
- every other fault is logged with its context and aborts the flow

Nothing is retried.
"""

import logging
from typing import Callable, Generic, TypeVar

from .DESFire import DESFire
from .defaults import (
    DEFAULT_ACCESS_RIGHTS,
    DEFAULT_AID,
    DEFAULT_COMMUNICATION_MODE,
    DEFAULT_DATA,
    DEFAULT_FILE_ID,
    DEFAULT_KEY_COUNT,
    DEFAULT_KEY_NUMBER,
    DEFAULT_KEY_SETTINGS,
    DEFAULT_MASTER_KEY,
)
from .devices.base import Session
from .enums import DESFireStatus, TransportErrorKind
from .exceptions import DESFireException, TransportError
from .key import DESFireKey
from .log import TransactionLog
from .schemas import ApduResponse, KeySettings
from .util import bytes_to_text, text_to_bytes

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionResult(Generic[T]):
    """
    Outcome of `run_transaction`.
    """

    def __init__(self, log: TransactionLog, value: T | None = None, error: DESFireException | None = None):
        self.log = log
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def cancelled(self) -> bool:
        return isinstance(self.error, TransportError) and self.error.kind == TransportErrorKind.USER_CANCEL

    def __repr__(self) -> str:
        return f"TransactionResult(ok={self.ok}, value={self.value!r}, error={self.error!r})"


def _handle_exception(ex: DESFireException, log: TransactionLog):
    if isinstance(ex, TransportError):
        if ex.kind == TransportErrorKind.USER_CANCEL:
            logger.debug("Transaction cancelled by the user")
        elif ex.kind == TransportErrorKind.TIMEOUT:
            log.warning("WARN: NFC Session Timeout")
        elif ex.kind == TransportErrorKind.IO:
            log.warning("WARN: NFC Error", f"{type(ex).__name__}: {ex}")
        else:
            raise ValueError(f"Unhandled transport error kind {ex.kind}")
    else:
        log.warning("WARN: NFC Error", f"{type(ex).__name__}: {ex}")


def run_transaction(
    session: Session, operation: Callable[[DESFire], T], log: TransactionLog | None = None
) -> TransactionResult[T]:
    """
    Acquire the card, run the operation and release the card on every exit path.

    Args:
        session (Session): Session manager handing out the card.
        operation (Callable[[DESFire], T]): Flow to run, e.g. `read_record`.
        log (TransactionLog | None, optional): Log of this transaction, a new one is created if not given.

    Returns:
        TransactionResult[T]: The value returned by the operation, or the error that aborted it
    """
    log = log if log is not None else TransactionLog(getattr(operation, "__name__", "transaction"))
    try:
        device = session.acquire()
        value = operation(DESFire(device, log=log))
    except DESFireException as ex:
        _handle_exception(ex, log)
        return TransactionResult(log, error=ex)
    except Exception as ex:
        logger.exception(f"Unexpected error in transaction {log.name}")
        log.warning("WARN: NFC Error", f"{type(ex).__name__}: {ex}")
        raise
    finally:
        session.release()
    return TransactionResult(log, value=value)


def authenticate_card(desfire: DESFire, key: DESFireKey | None = None, key_number: int = DEFAULT_KEY_NUMBER) -> bool:
    """
    Selects the PICC level application and authenticates with its master key.

    Raises:
        DESFireCommunicationError: if the PICC level application cannot be selected
        DESFireAuthException: if the authentication fails
    """
    desfire.select_picc_level().raise_for_status()
    desfire.authenticate(key or DESFireKey(DEFAULT_MASTER_KEY), key_number)
    return desfire.is_authenticated


def write_record(
    desfire: DESFire,
    text: str = DEFAULT_DATA,
    aid: list[int] = DEFAULT_AID,
    file_id: int = DEFAULT_FILE_ID,
) -> ApduResponse:
    """
    Creates the application and file (if missing) and writes the text record to the file.

    The file is created with exactly the length of the record. An application or file that already exists
    is not an error, the record is written into it. A shorter record is padded with `0x00` up to the size of
    the existing file, so no bytes of a previous record remain.

    Raises:
        DESFireException: if the text is not Latin-1 or too long
        DESFireCommunicationError: if a command fails
    """
    data = text_to_bytes(text)
    if desfire.log is not None:
        desfire.log.info("Writing", text)

    desfire.select_picc_level().raise_for_status()
    _ignore_duplicate(desfire.create_application(aid, KeySettings(DEFAULT_KEY_SETTINGS, DEFAULT_KEY_COUNT)))
    desfire.select_application(aid).raise_for_status()
    created = _ignore_duplicate(
        desfire.create_file(file_id, DEFAULT_COMMUNICATION_MODE, DEFAULT_ACCESS_RIGHTS, len(data))
    )
    if not created:
        file_size = len(desfire.read_data(file_id).raise_for_status().payload)
        data += [0x00] * (file_size - len(data))
    return desfire.write_data(file_id, 0, data).raise_for_status()


def read_record(desfire: DESFire, aid: list[int] = DEFAULT_AID, file_id: int = DEFAULT_FILE_ID) -> str:
    """
    Reads the whole record file and decodes it as text. Trailing `0x00` padding is removed.

    Raises:
        DESFireCommunicationError: if a command fails
        DESFireException: if the data is not valid UTF-8
    """
    desfire.select_picc_level().raise_for_status()
    desfire.select_application(aid).raise_for_status()
    response = desfire.read_data(file_id).raise_for_status()
    payload = list(response.payload)
    while payload and payload[-1] == 0x00:
        payload.pop()
    text = bytes_to_text(payload)
    if desfire.log is not None:
        desfire.log.info("STORED DATA", text)
    return text


def _ignore_duplicate(response: ApduResponse) -> bool:
    """
    Returns True if the application or file was created, False if it already existed.
    """
    if response.status == DESFireStatus.ST_DuplicateAidFiles:
        logger.info("Application or file already exists")
        return False
    response.raise_for_status()
    return True
