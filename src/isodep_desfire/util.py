import logging
import string
from typing import Literal

from .exceptions import DESFireException

logger = logging.getLogger(__name__)


def to_hex_string(data: list[int] | bytes | bytearray, separator: str = "") -> str:
    """
    Render each byte as two uppercase hex digits.

    Args:
        data (list[int] | bytes | bytearray): Bytes to render.
        separator (str, optional): Inserted between two bytes. Defaults to no separator.

    Returns:
        str: Hex representation, e.g. `9100`
    """
    return separator.join(f"{byte:02X}" for byte in data)


def hex_to_bytes(text: str, strict: bool = False) -> list[int]:
    """
    Parse a hex string two characters at a time.

    !!! warning
        If the string has an odd length the last character is silently dropped, so `"ABC"` parses to `[0xAB]`.
        Use `strict=True` to get an exception instead.

    Args:
        text (str): Hex digits without separators, upper or lower case.
        strict (bool, optional): Reject strings of odd length.

    Raises:
        DESFireException: if the string contains non-hex characters, or has an odd length and `strict` is set

    Returns:
        list[int]: Parsed bytes
    """
    if len(text) % 2:
        if strict:
            raise DESFireException(f"Hex string has an odd length ({len(text)})")
        logger.debug(f"Dropping trailing hex character of {text!r}")

    pairs = [text[i : i + 2] for i in range(0, len(text) - 1, 2)]
    # int(x, 16) also accepts signs and whitespace
    if any(char not in string.hexdigits for pair in pairs for char in pair):
        raise DESFireException(f"Invalid hex string {text!r}")
    return [int(pair, 16) for pair in pairs]


def text_to_bytes(text: str, encoding: str | None = None) -> list[int]:
    """
    Convert text into bytes that can be written to a file on the card.

    By default every character maps to exactly one byte (its code point), which only covers Latin-1.
    Pass an `encoding` such as `"utf-8"` to encode text outside of that range.

    Raises:
        DESFireException: if a character does not fit into a single byte and no encoding is given
    """
    if encoding is not None:
        return list(text.encode(encoding))

    result = []
    for char in text:
        code_point = ord(char)
        if code_point > 0xFF:
            raise DESFireException(f"Character {char!r} (U+{code_point:04X}) does not fit into a single byte")
        result.append(code_point)
    return result


def bytes_to_text(data: list[int] | bytes | bytearray) -> str:
    """
    Decode bytes read from the card as UTF-8.

    Note that this is not the inverse of `text_to_bytes` without an encoding: multi-byte UTF-8 sequences
    are decoded here, while Latin-1 characters above 0x7F written as single bytes are not valid UTF-8.

    Raises:
        DESFireException: if the data is not valid UTF-8
    """
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as ex:
        raise DESFireException(f"Data is not valid UTF-8: {to_hex_string(data)}") from ex


def get_int(data: int | str | bytearray | bytes | list[int], byteorder: Literal["little", "big"] = "big") -> int:
    """
    Convert a byte list, bytearray, hex string or int to an integer.
    """
    if isinstance(data, int):
        return data
    elif isinstance(data, str):
        return int.from_bytes(bytes(hex_to_bytes(data, strict=True)), byteorder=byteorder)
    return int.from_bytes(bytes(data), byteorder=byteorder)


def get_list(
    data: list[int] | str | bytearray | int | bytes, byte_size: int = 2, byteorder: Literal["little", "big"] = "big"
) -> list[int]:
    """
    Utility method to simplify the conversion of data to a list of integers.
    Each entry in the list represents one byte of the input data.

    Args:
        data (list[int] | str | bytearray | int | bytes): Input that should be converted to a list of integers.
            Strings are parsed as hex, use `text_to_bytes` for text.
        byte_size (int, optional): Needed when input data is of type `int`.
            Guarantees that the list that is returned has this length.
        byteorder (Literal["little", "big"], optional): Needed when input data is of type `int`.

    Raises:
        DESFireException: if a list entry is not a byte value or the input type is not supported

    Returns:
        A list of integers (each entry representing one byte).
    """
    if isinstance(data, list):
        if not all(isinstance(x, int) and 0 <= x <= 255 for x in data):
            raise DESFireException(f"List contains values that are not bytes: {data!r}")
        return list(data)
    elif isinstance(data, str):
        return hex_to_bytes(data.replace(" ", ""), strict=True)
    elif isinstance(data, bytearray) or isinstance(data, bytes):
        return list(data)
    elif isinstance(data, int):
        return list(data.to_bytes(byte_size, byteorder=byteorder))

    raise DESFireException(f"Data type not recognized: {type(data)}")


def le24(value: int) -> list[int]:
    """
    Encode the low 24 bits of a value as three little endian bytes, as used for DESFire offsets and lengths.
    """
    return get_list(value & 0xFFFFFF, byte_size=3, byteorder="little")


def rotate_left(data: list[int]) -> list[int]:
    """
    Move the first byte to the end. Used to form RndB' during authentication.
    """
    if not data:
        return data
    return data[1:] + data[:1]


def rotate_right(data: list[int]) -> list[int]:
    """
    Move the last byte to the front, undoing `rotate_left`.
    """
    if not data:
        return data
    return data[-1:] + data[:-1]
