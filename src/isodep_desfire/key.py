import logging

from .crypto import BLOCK_SIZE, des_cbc_decrypt, des_cbc_encrypt
from .exceptions import DESFireException
from .util import get_list, to_hex_string

logger = logging.getLogger(__name__)


class DESFireKey:
    """
    DES key object that is used for the authentication handshake.
    """

    key_bytes: list[int]
    triple_des: bool = False

    # IV used for every cipher operation with this key
    iv: list[int]

    def __init__(
        self,
        key_data: list[int] | str | bytearray | int | bytes | None = None,
        triple_des: bool = False,
        iv: list[int] | str | bytearray | bytes | None = None,
    ):
        """
        Initializes the key object.

        Args:
            key_data (list[int] | str | bytearray | int | bytes | None, optional): 8 or 16 bytes of key material.
                Will be parsed using the get_list function. Defaults to the 16 byte all zero master key.
            triple_des (bool, optional): Use two key 3DES for 16 byte keys instead of single DES with
                the first key half.
            iv (list[int] | str | bytearray | bytes | None, optional): Overrides the derived IV.

        Raises:
            DESFireException: If the key or IV has an invalid length.
        """
        self.triple_des = triple_des
        self.set_key([0x00] * 16 if key_data is None else key_data)
        if iv is not None:
            self.set_iv(get_list(iv))

    def set_key(self, key: list[int] | str | bytearray | int | bytes):
        """
        Sets the key to the given value and derives the IV from it.

        For a 16 byte key the IV is the first half of the key, an 8 byte key uses an all zero IV.
        """
        key_bytes = get_list(key)
        if len(key_bytes) not in (8, 16):
            raise DESFireException(f"Key length error! The key must be 8 or 16 bytes long, got {len(key_bytes)}.")
        self.key_bytes = key_bytes
        self.set_iv(key_bytes[:BLOCK_SIZE] if len(key_bytes) == 16 else [0x00] * BLOCK_SIZE)

    def get_key(self) -> list[int]:
        return list(self.key_bytes)

    def set_iv(self, iv: list[int]):
        if len(iv) != BLOCK_SIZE:
            raise DESFireException(f"IV must be {BLOCK_SIZE} bytes long, got {len(iv)}")
        logger.debug(f"Setting IV to {to_hex_string(iv)}")
        self.iv = list(iv)

    def encrypt(self, data: list[int]) -> list[int]:
        """
        Encrypts the given data with the key and returns the encrypted data as a list of integers.
        """
        return des_cbc_encrypt(data, self.key_bytes, self.iv, self.triple_des)

    def decrypt(self, data: list[int]) -> list[int]:
        """
        Decrypts the given data with the key and returns the decrypted data as a list of integers.
        """
        return des_cbc_decrypt(data, self.key_bytes, self.iv, self.triple_des)

    def __repr__(self) -> str:
        mode = "2K3DES" if self.triple_des and len(self.key_bytes) == 16 else "DES"
        return f"DESFireKey({len(self.key_bytes)} bytes, {mode})"
