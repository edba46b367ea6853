import pytest

from isodep_desfire.exceptions import DESFireException
from isodep_desfire.key import DESFireKey
from isodep_desfire.util import (
    bytes_to_text,
    get_int,
    get_list,
    hex_to_bytes,
    le24,
    rotate_left,
    rotate_right,
    text_to_bytes,
    to_hex_string,
)


def test_to_hex_string_uppercase_without_separator():
    assert to_hex_string([0x00, 0x0A, 0xFF, 0x91]) == "000AFF91"
    assert to_hex_string([]) == ""


def test_to_hex_string_with_separator():
    assert to_hex_string(b"\x90\x5a", " ") == "90 5A"


@pytest.mark.parametrize("hex_string", ["", "00", "9100", "0123456789abcdef", "DEADBEEF", "ff00Ff"])
def test_hex_round_trip(hex_string):
    assert to_hex_string(hex_to_bytes(hex_string)) == hex_string.upper()


def test_hex_to_bytes_drops_trailing_odd_character():
    """
    Odd length input loses its last character. Kept for compatibility, see `strict` for the checked variant.
    """
    assert hex_to_bytes("ABC") == [0xAB]
    assert hex_to_bytes("A") == []


def test_hex_to_bytes_strict_rejects_odd_length():
    with pytest.raises(DESFireException):
        hex_to_bytes("ABC", strict=True)


@pytest.mark.parametrize("hex_string", ["ZZ", "-1", "+F", " A", "0x01", "A\n"])
def test_hex_to_bytes_rejects_non_hex(hex_string):
    with pytest.raises(DESFireException):
        hex_to_bytes(hex_string)


def test_key_with_signed_hex_is_rejected():
    with pytest.raises(DESFireException):
        DESFireKey("-1" + "00" * 15)


def test_text_to_bytes_one_byte_per_character():
    assert text_to_bytes("STA") == [0x53, 0x54, 0x41]
    assert text_to_bytes("EAL MKK 3 UE") == list(b"EAL MKK 3 UE")
    assert text_to_bytes("é") == [0xE9]


def test_text_to_bytes_rejects_characters_above_latin1():
    with pytest.raises(DESFireException):
        text_to_bytes("€")


def test_text_to_bytes_with_encoding():
    assert text_to_bytes("€", encoding="utf-8") == [0xE2, 0x82, 0xAC]


def test_bytes_to_text_decodes_multibyte_utf8():
    assert bytes_to_text([0xE2, 0x82, 0xAC]) == "€"
    assert bytes_to_text(list(b"EAL MKK 3 UE")) == "EAL MKK 3 UE"


def test_text_codec_is_not_symmetric_outside_ascii():
    """
    Latin-1 characters are written as a single byte, but read back as UTF-8.
    The round trip only holds for ASCII text.
    """
    assert bytes_to_text(text_to_bytes("EAL MKK 3 UE")) == "EAL MKK 3 UE"

    with pytest.raises(DESFireException):
        bytes_to_text(text_to_bytes("café"))

    # Going through UTF-8 on both sides works
    assert bytes_to_text(text_to_bytes("café €", encoding="utf-8")) == "café €"


def test_rotate_left():
    assert rotate_left([1, 2, 3, 4]) == [2, 3, 4, 1]
    assert rotate_left([]) == []


def test_rotate_right():
    assert rotate_right([1, 2, 3, 4]) == [4, 1, 2, 3]
    assert rotate_right([]) == []


def test_rotation_keeps_zero_bytes():
    assert rotate_left([0x00, 0x11, 0x22]) == [0x11, 0x22, 0x00]
    assert rotate_right([0x11, 0x22, 0x00]) == [0x00, 0x11, 0x22]


@pytest.mark.parametrize(
    "data",
    [[0x42], [0x00] * 8, [0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08], list(range(16))],
)
def test_rotation_inverse(data):
    assert rotate_right(rotate_left(data)) == data
    assert rotate_left(rotate_right(data)) == data


def test_rotation_does_not_modify_input():
    data = [1, 2, 3]
    rotate_left(data)
    rotate_right(data)
    assert data == [1, 2, 3]


def test_le24():
    assert le24(12) == [0x0C, 0x00, 0x00]
    assert le24(0x123456) == [0x56, 0x34, 0x12]
    assert le24(0x01000010) == [0x10, 0x00, 0x00]


def test_get_list():
    assert get_list("00 11 22") == [0x00, 0x11, 0x22]
    assert get_list(b"\x01\x02") == [0x01, 0x02]
    assert get_list(0x0102, 3, "little") == [0x02, 0x01, 0x00]
    with pytest.raises(DESFireException):
        get_list([0x100])


def test_get_int():
    assert get_int([0x0C, 0x00, 0x00], "little") == 12
    assert get_int("0102") == 0x0102
