import pytest

from isodep_desfire import DESFire, DESFireKey
from isodep_desfire.devices.base import Device
from isodep_desfire.devices.simulator import MAX_FRAME_PAYLOAD, SimulatedDESFireCard
from isodep_desfire.enums import DESFireCommunicationMode, DESFireKeySettings, DESFireStatus
from isodep_desfire.exceptions import DESFireCommunicationError, DESFireException
from isodep_desfire.schemas import FilePermissions, KeySettings
from isodep_desfire.util import bytes_to_text, text_to_bytes

AID = text_to_bytes("STA")
DATA = text_to_bytes("EAL MKK 3 UE")
KEY_SETTINGS = KeySettings([DESFireKeySettings.KS_FACTORY_DEFAULT], 1)


@pytest.fixture
def card() -> SimulatedDESFireCard:
    return SimulatedDESFireCard()


@pytest.fixture
def desfire(card) -> DESFire:
    return DESFire(card)


def prepare_file(desfire: DESFire, size: int, permissions: FilePermissions | list[int] = [0xEE, 0xEE]):
    desfire.select_picc_level().raise_for_status()
    desfire.create_application(AID, KEY_SETTINGS).raise_for_status()
    desfire.select_application(AID).raise_for_status()
    desfire.create_file(0x01, DESFireCommunicationMode.ENCRYPTED, permissions, size).raise_for_status()


def test_command_layout(card, desfire):
    prepare_file(desfire, len(DATA))
    desfire.write_data(0x01, 0, DATA)
    desfire.read_data(0x01)

    assert card.received == [
        [0x90, 0x5A, 0x00, 0x00, 0x03, 0x00, 0x00, 0x00, 0x00],
        [0x90, 0xCA, 0x00, 0x00, 0x05, 0x53, 0x54, 0x41, 0x0F, 0x01, 0x00],
        [0x90, 0x5A, 0x00, 0x00, 0x03, 0x53, 0x54, 0x41, 0x00],
        [0x90, 0xCD, 0x00, 0x00, 0x07, 0x01, 0x03, 0xEE, 0xEE, 0x0C, 0x00, 0x00, 0x00],
        [0x90, 0x3D, 0x00, 0x00, 0x13, 0x01, 0x00, 0x00, 0x00, 0x0C, 0x00, 0x00] + DATA + [0x00],
        [0x90, 0xBD, 0x00, 0x00, 0x07, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00],
    ]


def test_write_then_read_record(card, desfire):
    prepare_file(desfire, len(DATA))

    assert desfire.write_data(0x01, 0, DATA).is_complete
    response = desfire.read_data(0x01)

    assert response.is_complete
    assert response.payload == DATA
    assert bytes_to_text(response.payload) == "EAL MKK 3 UE"
    assert card.read_file(AID, 0x01) == DATA


def test_read_with_offset_and_length(desfire):
    prepare_file(desfire, len(DATA))
    desfire.write_data(0x01, 0, DATA)

    assert desfire.read_data(0x01, offset=4, length=3).payload == text_to_bytes("MKK")


def test_write_with_offset(desfire):
    prepare_file(desfire, 8)
    desfire.write_data(0x01, 2, [0xAA, 0xBB])

    assert desfire.read_data(0x01).payload == [0x00, 0x00, 0xAA, 0xBB, 0x00, 0x00, 0x00, 0x00]


def test_read_follows_additional_frames(card, desfire):
    prepare_file(desfire, 100)
    for offset in range(0, 100, 20):
        desfire.write_data(0x01, offset, list(range(offset, offset + 20)))

    response = desfire.read_data(0x01)

    assert response.is_complete
    assert response.payload == list(range(100))
    assert card.received[-1] == [0x90, 0xAF, 0x00, 0x00, 0x00]


class EmptyFramesDevice(Device):
    """Answers every command with `91 AF`, only the first reply carries data."""

    def __init__(self):
        self.received = []

    def transceive(self, bytes):
        self.received.append(list(bytes))
        if len(self.received) == 1:
            return [0x01, 0x02, 0x91, 0xAF]
        return [0x91, 0xAF]


def test_read_stops_on_empty_continuation_frame():
    device = EmptyFramesDevice()

    with pytest.raises(DESFireCommunicationError) as exc_info:
        DESFire(device).read_data(0x01)

    assert exc_info.value.status_code == [0x91, 0xAF]
    assert len(device.received) == 2


def test_read_without_following_frames(desfire):
    prepare_file(desfire, 100)

    response = desfire.read_data(0x01, follow_frames=False)

    assert response.has_more_frames
    assert len(response.payload) == MAX_FRAME_PAYLOAD


def test_write_beyond_file_size(desfire):
    prepare_file(desfire, 4)

    response = desfire.write_data(0x01, 0, DATA)

    assert response.is_success
    assert not response.is_complete
    assert response.status == DESFireStatus.ST_LimitExceeded


def test_write_too_long_is_not_sent(card, desfire):
    with pytest.raises(DESFireException):
        desfire.write_data(0x01, 0, [0x00] * 43)
    assert card.received == []


def test_missing_file(desfire):
    desfire.select_picc_level()
    desfire.create_application(AID, KEY_SETTINGS)
    desfire.select_application(AID)

    response = desfire.read_data(0x01)

    assert response.status_word == [0x91, 0xF0]
    with pytest.raises(DESFireCommunicationError) as exc_info:
        response.raise_for_status()
    assert exc_info.value.status_code == [0x91, 0xF0]


def test_select_unknown_application(desfire):
    response = desfire.select_application(AID)

    assert response.status == DESFireStatus.ST_AppNotFound
    assert desfire.last_selected_application is None


def test_duplicate_application(desfire):
    desfire.select_picc_level()
    assert desfire.create_application(AID, KEY_SETTINGS).is_complete
    assert desfire.create_application(AID, KEY_SETTINGS).status == DESFireStatus.ST_DuplicateAidFiles


def test_file_permissions_object(card, desfire):
    prepare_file(desfire, 8, FilePermissions())
    assert card.received[-1][7:9] == [0xEE, 0xEE]


def test_restricted_file_requires_authentication(desfire):
    prepare_file(desfire, len(DATA), FilePermissions(read_key=0x0, write_key=0x0, read_write_key=0x0, change_key=0x0))

    assert desfire.write_data(0x01, 0, DATA).status == DESFireStatus.ST_PermissionDenied

    desfire.authenticate(DESFireKey())
    assert desfire.write_data(0x01, 0, DATA).is_complete
    assert desfire.read_data(0x01).payload == DATA


def test_file_size_keeps_low_24_bits(card, desfire):
    prepare_file(desfire, 0x01000010)
    assert card.received[-1][9:12] == [0x10, 0x00, 0x00]


def test_invalid_aid_length(desfire):
    with pytest.raises(DESFireException):
        desfire.select_application([0x01, 0x02])


def test_invalid_access_rights(desfire):
    with pytest.raises(DESFireException):
        desfire.create_file(0x01, DESFireCommunicationMode.PLAIN, [0xEE], 8)


def test_authenticate_and_select(desfire):
    desfire.select_picc_level()
    authenticator = desfire.authenticate(DESFireKey())
    assert authenticator.is_authenticated
    assert desfire.is_authenticated

    desfire.select_picc_level()
    assert not desfire.is_authenticated


def test_key_settings():
    settings = KeySettings(
        [DESFireKeySettings.KS_ALLOW_CHANGE_MK, DESFireKeySettings.KS_LISTING_WITHOUT_MK], max_keys=3
    )
    assert settings.to_list() == [0x03, 0x03]
    assert KEY_SETTINGS.to_list() == [0x0F, 0x01]
    with pytest.raises(DESFireException):
        KeySettings(max_keys=15)
