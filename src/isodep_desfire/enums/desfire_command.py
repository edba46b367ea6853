from enum import Enum


class DESFireCommand(Enum):
    """
    DESFire native command codes, sent as the INS byte of an ISO 7816-4 wrapped APDU (CLA `0x90`).

    Source: MIFARE DESFire EV1 datasheet, https://neteril.org/files/M075031_desfire.pdf
    """

    # Authentication Commands
    AUTHENTICATE_LEGACY = 0x0A  # DES / 2K3DES, answered with the encrypted RndB

    # Communication Commands
    ADDITIONAL_FRAME = 0xAF  # Second handshake pass and continuation of chained replies

    # Application Related Commands
    CREATE_APPLICATION = 0xCA
    SELECT_APPLICATION = 0x5A

    # File Related Commands
    CREATE_STD_DATA_FILE = 0xCD
    READ_DATA = 0xBD
    WRITE_DATA = 0x3D
