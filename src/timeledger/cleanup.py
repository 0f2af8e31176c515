# SPDX-License-Identifier: MIT

import atexit

from timeledger.repository.configuration import CONFIGURATION_REPO
from timeledger.repository.reference import REFERENCE_REPO
from timeledger.repository.time_entry import TIME_ENTRY_REPO


def flush_and_sync() -> None:
    CONFIGURATION_REPO.flush()
    REFERENCE_REPO.flush()
    TIME_ENTRY_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush_and_sync)
