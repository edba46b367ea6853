"""
Authenticate against the PICC level application of a DESFire EV1 card on a PC/SC reader,
using the factory default DES master key.
"""

import logging

from isodep_desfire import DESFire, DESFireKey, PCSCSession
from isodep_desfire.util import to_hex_string

logging.basicConfig(level=logging.INFO)

print("Please present DESfire tag...")

with PCSCSession(timeout=30) as device:
    desfire = DESFire(device)

    resp = desfire.select_picc_level()
    print("Select PICC Level App", to_hex_string(resp.status_word))

    authenticator = desfire.authenticate(DESFireKey("00" * 16), key_number=0x0)
    print("Authentication state:", authenticator.state.name)
