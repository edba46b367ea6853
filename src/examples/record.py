"""
Write the demo record to a DESFire EV1 card on a PC/SC reader and read it back.

Steps:
1. Select the PICC level application
2. Create the application "STA" (ignored if it already exists)
3. Create file 1 with free access rights
4. Write the record
5. Read file 1 and decode it as text

Timeouts and card errors are logged, cancelling the card request is ignored.
"""

import logging

from isodep_desfire import PCSCSession, read_record, run_transaction, write_record

# Record to store on the card, at most 42 Latin-1 characters
DATA = "EAL MKK 3 UE"

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

print("Please present DESfire tag to write...")
result = run_transaction(PCSCSession(), lambda desfire: write_record(desfire, DATA))
print(result.log)

print("Please present DESfire tag to read...")
result = run_transaction(PCSCSession(), read_record)
print(result.log)

if result.ok:
    print("STORED DATA:", result.value)
