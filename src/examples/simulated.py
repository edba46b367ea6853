"""
Runs the complete demo without a reader: authenticate, write the record and read it back from a
simulated DESFire EV1 card.
"""

import logging

from isodep_desfire import SimulatedDESFireCard, SimulatedSession, TransactionLog
from isodep_desfire import authenticate_card, read_record, run_transaction, write_record

logging.basicConfig(level=logging.INFO)

card = SimulatedDESFireCard()
log = TransactionLog("demo")

for operation in (authenticate_card, write_record, read_record):
    result = run_transaction(SimulatedSession(card), operation, log)
    print(f"{operation.__name__}: {result}")

print(log)
