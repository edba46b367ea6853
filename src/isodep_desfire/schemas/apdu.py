from ..enums import DESFireStatus
from ..exceptions import DESFireCommunicationError
from ..util import to_hex_string

DESFIRE_CLA = 0x90
DESFIRE_SW1 = 0x91


class Apdu:
    """
    An ISO 7816-4 short form command APDU. DESFire native commands are wrapped with class byte `0x90`,
    the native command code as instruction and the command parameters as data.
    """

    def __init__(
        self,
        ins: int,
        data: list[int] | None = None,
        le: int | None = 0x00,
        cla: int = DESFIRE_CLA,
        p1: int = 0x00,
        p2: int = 0x00,
    ):
        """
        Args:
            ins (int): Instruction byte, the DESFire command code.
            data (list[int] | None, optional): Command data. Lc is only sent if data is present.
            le (int | None, optional): Expected response length. `None` omits the Le byte.
            cla (int, optional): Class byte, `0x90` for wrapped DESFire commands.
            p1 (int, optional): First parameter byte.
            p2 (int, optional): Second parameter byte.
        """
        self.cla = cla
        self.ins = ins
        self.p1 = p1
        self.p2 = p2
        self.data = data or []
        self.le = le

    @property
    def lc(self) -> int | None:
        """
        Length of the data field, `None` if no data is sent.
        """
        return len(self.data) if self.data else None

    def __repr__(self) -> str:
        return f"Apdu(cla={self.cla:02X}, ins={self.ins:02X}, data={to_hex_string(self.data)})"


class ApduResponse:
    """
    A reply from the card, split into payload and the trailing two byte status word.
    """

    def __init__(self, status_word: list[int], payload: list[int] | None = None):
        self.status_word = status_word
        self.payload = payload or []

    @property
    def sw1(self) -> int:
        return self.status_word[0]

    @property
    def sw2(self) -> int:
        return self.status_word[1]

    @property
    def status(self) -> DESFireStatus | None:
        """
        The DESFire status encoded in SW2, `None` if SW1 is not `0x91` or the code is unknown.
        """
        if self.sw1 != DESFIRE_SW1:
            return None
        try:
            return DESFireStatus(self.sw2)
        except ValueError:
            return None

    @property
    def is_success(self) -> bool:
        """
        True if the reply belongs to the native DESFire status family (SW1 is `0x91`).
        This includes fault codes such as `91 AE`, check `is_complete` for the operation result.
        """
        return self.sw1 == DESFIRE_SW1

    @property
    def is_complete(self) -> bool:
        """
        True if the card reported `91 00` (operation successful).
        """
        return self.status_word == [DESFIRE_SW1, DESFireStatus.ST_Success.value]

    @property
    def has_more_frames(self) -> bool:
        """
        True if the card reported `91 AF`, i.e. more data follows or the card waits for the next frame.
        """
        return self.status_word == [DESFIRE_SW1, DESFireStatus.ST_MoreFrames.value]

    def describe_status(self) -> str:
        status = self.status
        if status is not None:
            return status.name
        return f"Unknown status {to_hex_string(self.status_word)}"

    def raise_for_status(self) -> "ApduResponse":
        """
        Raises an exception unless the card reported `91 00`.

        Raises:
            DESFireCommunicationError: carrying the raw status word

        Returns:
            ApduResponse: The response itself to allow chaining.
        """
        if not self.is_complete:
            raise DESFireCommunicationError(self.describe_status(), self.status_word)
        return self

    def __eq__(self, other) -> bool:
        if not isinstance(other, ApduResponse):
            return NotImplemented
        return self.status_word == other.status_word and self.payload == other.payload

    def __repr__(self) -> str:
        return f"ApduResponse(status_word={to_hex_string(self.status_word)}, payload={to_hex_string(self.payload)})"
