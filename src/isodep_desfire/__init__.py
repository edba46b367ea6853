from .apdu import build_apdu, exchange, is_success, parse_response, wrap_command
from .auth import DESFireAuthenticator
from .crypto import des_cbc_decrypt, des_cbc_encrypt
from .DESFire import DESFire
from .devices.pcsc import PCSCDevice, PCSCSession
from .devices.simulator import SimulatedDESFireCard, SimulatedSession
from .key import DESFireKey
from .log import TransactionLog
from .transaction import authenticate_card, read_record, run_transaction, write_record
from .util import bytes_to_text, get_list, hex_to_bytes, rotate_left, rotate_right, text_to_bytes, to_hex_string

__all__ = [
    "DESFire",
    "DESFireAuthenticator",
    "DESFireKey",
    "PCSCDevice",
    "PCSCSession",
    "SimulatedDESFireCard",
    "SimulatedSession",
    "TransactionLog",
    "authenticate_card",
    "build_apdu",
    "bytes_to_text",
    "des_cbc_decrypt",
    "des_cbc_encrypt",
    "exchange",
    "get_list",
    "hex_to_bytes",
    "is_success",
    "parse_response",
    "read_record",
    "rotate_left",
    "rotate_right",
    "run_transaction",
    "text_to_bytes",
    "to_hex_string",
    "wrap_command",
    "write_record",
]
