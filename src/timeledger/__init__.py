# SPDX-License-Identifier: MIT

from timeledger.cleanup import register_cleanup
from timeledger.initialize import initialize
from timeledger.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
