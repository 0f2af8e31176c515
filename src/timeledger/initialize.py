# SPDX-License-Identifier: MIT

import logging

from rich.logging import RichHandler
from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from timeledger import configuration
from timeledger.repository.configuration import CONFIGURATION_REPO
from timeledger.view import state as view_state


def initialize() -> None:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    configuration.load_data_path_configuration()
    configuration.DATA_PATH.mkdir(parents=True, exist_ok=True)

    __ensure_config_files()
    __ensure_data_files()

    config = CONFIGURATION_REPO.get_config()
    __configure_logging(config.get("log_level", "WARNING"))
    view_state.set_show_header(config["show_header"])


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        configuration.APP_CONFIG_PATH.touch()
        config: configuration.Configuration = dict(  # type: ignore[assignment]
            configuration.DEFAULT_CONFIGURATION
        )
        configuration.APP_CONFIG_PATH.write_text(dump(config, Dumper=Dumper))


def __ensure_data_files() -> None:
    if not configuration.DATA_REFERENCE_PATH.is_file():
        configuration.DATA_REFERENCE_PATH.touch()
        reference: dict[str, list[dict[str, str]]] = {
            "projects": [],
            "areas_of_focus": [],
            "cost_codes": [],
            "users": [],
        }
        configuration.DATA_REFERENCE_PATH.write_text(dump(reference, Dumper=Dumper))

    # One file per time entry
    if not configuration.DATA_TIME_ENTRIES_DIR.is_dir():
        configuration.DATA_TIME_ENTRIES_DIR.mkdir(parents=True, exist_ok=True)


def __configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
