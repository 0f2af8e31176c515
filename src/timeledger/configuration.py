# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "timeledger"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_TIME_ENTRIES_DIR: Path = DATA_PATH / "time_entries"
DATA_REFERENCE_PATH: Path = DATA_PATH / "reference.yaml"


class Configuration(TypedDict):
    data_path: Optional[str]
    show_header: bool
    actor: Optional[str]
    default_sort_field: str
    default_sort_direction: str
    require_reference_fields: bool
    log_level: NotRequired[str]


DEFAULT_CONFIGURATION: Configuration = {
    "data_path": None,
    "show_header": True,
    "actor": None,
    "default_sort_field": "start_time",
    "default_sort_direction": "desc",
    "require_reference_fields": True,
    "log_level": "WARNING",
}


def set_data_path(data_path: Path) -> None:
    global DATA_PATH, DATA_TIME_ENTRIES_DIR, DATA_REFERENCE_PATH

    DATA_PATH = data_path
    DATA_TIME_ENTRIES_DIR = DATA_PATH / "time_entries"
    DATA_REFERENCE_PATH = DATA_PATH / "reference.yaml"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are instantiated.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return
    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))
