FREE_ACCESS = 0x0E
NO_ACCESS = 0x0F


class FilePermissions:
    def __init__(
        self,
        read_key: int = FREE_ACCESS,
        write_key: int = FREE_ACCESS,
        read_write_key: int = FREE_ACCESS,
        change_key: int = FREE_ACCESS,
    ):
        """
        This class represents the access rights of a file on a DESFire card.

        Each permission represents a key number within the application that should be used
        to obtain the corresponding access rights. Each of them is a 4-bit value:

        - 0x0 - 0xD   Key number that should be used to obtain the corresponding access rights
        - 0xE         No restrictions (free access), the default
        - 0xF         No Access allowed
        """
        self.read_access = read_key & 0x0F
        self.write_access = write_key & 0x0F
        self.read_and_write_access = read_write_key & 0x0F
        self.change_access = change_key & 0x0F

    def parse(self, data: list[int]):
        """
        Parse the two access right bytes as sent with CreateStdDataFile.

        ```
        0000 0000 0010 0011
        ^^^^ ^^^^ ^^^^ ^^^^
        RW   C    R    W
        ```
        """
        self.write_access = data[1] & 0x0F
        self.read_access = (data[1] >> 4) & 0x0F
        self.change_access = data[0] & 0x0F
        self.read_and_write_access = (data[0] >> 4) & 0x0F

    def get_permissions(self) -> list[int]:
        """
        Returns the permissions as a list of two bytes.
        """
        return [
            ((self.read_and_write_access & 0x0F) << 4) | (self.change_access & 0x0F),
            ((self.read_access & 0x0F) << 4) | (self.write_access & 0x0F),
        ]

    def is_free(self, access: int) -> bool:
        return access == FREE_ACCESS

    def __repr__(self):
        return (
            f"FilePermissions(read={self.read_access:X}, write={self.write_access:X}, "
            f"read_write={self.read_and_write_access:X}, change={self.change_access:X})"
        )
