import logging

from Crypto.Cipher import DES, DES3

from .exceptions import DESFireException, InvalidBlockLengthError
from .util import to_hex_string

logger = logging.getLogger(__name__)

BLOCK_SIZE = 8


def _strip_parity(half: bytes) -> bytes:
    return bytes(b & 0xFE for b in half)


def get_ciphermod(key: bytes, iv: bytes, triple_des: bool = False):
    """
    Returns the CBC cipher module for the given key.

    An 8 byte key always uses single DES. A 16 byte key uses single DES with its first half unless
    `triple_des` is set, in which case two key 3DES (EDE) is used. Two key 3DES with identical halves is
    single DES, so that case is mapped to DES as well (pycryptodome refuses such degenerate keys).
    """
    if len(iv) != BLOCK_SIZE:
        raise DESFireException(f"IV must be {BLOCK_SIZE} bytes long, got {len(iv)}")

    if len(key) == 8:
        logger.debug("Creating DES cipher module")
        return DES.new(key, DES.MODE_CBC, iv)
    elif len(key) == 16:
        if triple_des and _strip_parity(key[:8]) != _strip_parity(key[8:]):
            logger.debug("Creating 2K3DES cipher module")
            return DES3.new(key, DES3.MODE_CBC, iv)
        logger.debug("Creating DES cipher module from the first key half")
        return DES.new(key[:8], DES.MODE_CBC, iv)

    logger.warning(f"Invalid DES key length {len(key)}")
    raise DESFireException(f"Key length error! DES keys must be 8 or 16 bytes long, got {len(key)}.")


def _check_block_length(data: list[int]):
    if len(data) % BLOCK_SIZE:
        raise InvalidBlockLengthError(f"Data length {len(data)} is not a multiple of the {BLOCK_SIZE} byte block size")


def des_cbc_encrypt(plaintext: list[int], key: list[int], iv: list[int], triple_des: bool = False) -> list[int]:
    """
    Encrypts data in CBC mode without padding.

    Args:
        plaintext (list[int]): Data to encrypt, length must be a multiple of 8.
        key (list[int]): 8 or 16 byte key.
        iv (list[int]): 8 byte initialization vector.
        triple_des (bool, optional): Use two key 3DES for 16 byte keys.

    Raises:
        InvalidBlockLengthError: if the data is not a multiple of the block size

    Returns:
        list[int]: Ciphertext, same length as the plaintext
    """
    _check_block_length(plaintext)
    cipher = get_ciphermod(bytes(key), bytes(iv), triple_des)
    ciphertext = list(cipher.encrypt(bytes(plaintext)))
    logger.debug(f"Encrypted {to_hex_string(plaintext)} -> {to_hex_string(ciphertext)}")
    return ciphertext


def des_cbc_decrypt(ciphertext: list[int], key: list[int], iv: list[int], triple_des: bool = False) -> list[int]:
    """
    Decrypts data in CBC mode without removing any padding. Mirrors `des_cbc_encrypt`.

    Raises:
        InvalidBlockLengthError: if the data is not a multiple of the block size
    """
    _check_block_length(ciphertext)
    cipher = get_ciphermod(bytes(key), bytes(iv), triple_des)
    plaintext = list(cipher.decrypt(bytes(ciphertext)))
    logger.debug(f"Decrypted {to_hex_string(ciphertext)} -> {to_hex_string(plaintext)}")
    return plaintext
