import logging

import pytest

from isodep_desfire import DESFireKey, SimulatedDESFireCard, SimulatedSession, TransactionLog
from isodep_desfire.defaults import DEFAULT_AID, DEFAULT_DATA
from isodep_desfire.enums import TransportErrorKind
from isodep_desfire.exceptions import AuthenticationRejectedError, DESFireCommunicationError
from isodep_desfire.transaction import authenticate_card, read_record, run_transaction, write_record
from isodep_desfire.util import text_to_bytes


def test_write_and_read_record():
    card = SimulatedDESFireCard()

    session = SimulatedSession(card)
    written = run_transaction(session, write_record)
    assert written.ok
    assert written.value.is_complete
    assert session.release_count == 1

    session = SimulatedSession(card)
    read = run_transaction(session, read_record)
    assert read.ok
    assert read.value == "EAL MKK 3 UE"
    assert session.release_count == 1
    assert "STORED DATA EAL MKK 3 UE" in read.log.messages()

    assert card.read_file(DEFAULT_AID, 0x01) == text_to_bytes(DEFAULT_DATA)


def test_write_record_twice():
    card = SimulatedDESFireCard()
    assert run_transaction(SimulatedSession(card), write_record).ok
    assert run_transaction(SimulatedSession(card), write_record).ok


def test_authenticate_card():
    result = run_transaction(SimulatedSession(SimulatedDESFireCard()), authenticate_card)
    assert result.ok
    assert result.value is True
    assert "AUTHEN SUCCESS" in result.log.messages()


def test_authentication_failure_is_logged_and_released():
    card = SimulatedDESFireCard(DESFireKey("80" + "00" * 15))
    session = SimulatedSession(card)

    result = run_transaction(session, authenticate_card)

    assert not result.ok
    assert isinstance(result.error, AuthenticationRejectedError)
    assert any(message.startswith("WARN: NFC Error") for message in result.log.messages(logging.WARNING))
    assert session.release_count == 1


def test_user_cancel_is_silent():
    session = SimulatedSession(cancel=True)

    result = run_transaction(session, read_record)

    assert result.cancelled
    assert result.error.kind == TransportErrorKind.USER_CANCEL
    assert result.log.messages(logging.WARNING) == []
    assert session.release_count == 1


def test_timeout_is_logged():
    session = SimulatedSession()

    result = run_transaction(session, read_record)

    assert not result.ok
    assert not result.cancelled
    assert result.log.messages(logging.WARNING) == ["WARN: NFC Session Timeout"]
    assert session.release_count == 1


def test_read_missing_record():
    result = run_transaction(SimulatedSession(SimulatedDESFireCard()), read_record)

    assert isinstance(result.error, DESFireCommunicationError)
    assert result.error.status_code == [0x91, 0xA0]


def test_session_released_on_unexpected_error():
    session = SimulatedSession(SimulatedDESFireCard())

    def broken(desfire):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run_transaction(session, broken)
    assert session.release_count == 1


def test_shared_log():
    card = SimulatedDESFireCard()
    log = TransactionLog("demo")

    run_transaction(SimulatedSession(card), write_record, log)
    run_transaction(SimulatedSession(card), read_record, log)

    assert str(log).startswith("LOG 1: Writing EAL MKK 3 UE")
    assert str(log).splitlines()[-1].endswith("STORED DATA EAL MKK 3 UE")


def test_session_context_manager():
    session = SimulatedSession(SimulatedDESFireCard())
    with session as device:
        assert session.acquired
        assert isinstance(device, SimulatedDESFireCard)
    assert not session.acquired
    assert session.release_count == 1


def test_shorter_record_replaces_longer_one():
    card = SimulatedDESFireCard()

    assert run_transaction(SimulatedSession(card), lambda desfire: write_record(desfire, "LONGER TEXT")).ok
    assert run_transaction(SimulatedSession(card), lambda desfire: write_record(desfire, "SHORT")).ok

    assert card.read_file(DEFAULT_AID, 0x01) == text_to_bytes("SHORT") + [0x00] * 6
    assert run_transaction(SimulatedSession(card), read_record).value == "SHORT"


def test_longer_record_does_not_fit_existing_file():
    card = SimulatedDESFireCard()
    run_transaction(SimulatedSession(card), lambda desfire: write_record(desfire, "SHORT"))

    result = run_transaction(SimulatedSession(card), lambda desfire: write_record(desfire, "LONGER TEXT"))

    assert isinstance(result.error, DESFireCommunicationError)
    assert result.error.status_code == [0x91, 0xBE]
    assert run_transaction(SimulatedSession(card), read_record).value == "SHORT"


def test_unexpected_error_is_logged(caplog):
    log = TransactionLog("broken")

    def broken(desfire):
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="isodep_desfire.transaction"):
        with pytest.raises(RuntimeError):
            run_transaction(SimulatedSession(SimulatedDESFireCard()), broken, log)

    assert log.messages(logging.WARNING) == ["WARN: NFC Error RuntimeError: boom"]
    assert any(record.exc_info and record.levelno == logging.ERROR for record in caplog.records)
