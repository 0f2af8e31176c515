# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from timeledger import configuration


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        self._config = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        if self._config is None:
            raise ValueError()

        # Back-fill keys added after the config file was written
        for key, value in configuration.DEFAULT_CONFIGURATION.items():
            if key not in self._config:
                cast(dict, self._config)[key] = value

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(dump(config, Dumper=Dumper))

    def flush(self) -> None:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        show_header: Optional[bool] = None,
        actor: Optional[str] = None,
        remove_actor: bool = False,
        default_sort_field: Optional[str] = None,
        default_sort_direction: Optional[str] = None,
        require_reference_fields: Optional[bool] = None,
        log_level: Optional[str] = None,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
    ) -> None:
        self.is_dirty = True

        if show_header is not None:
            self.config["show_header"] = show_header
        if actor is not None:
            self.config["actor"] = actor
        if remove_actor:
            self.config["actor"] = None
        if default_sort_field is not None:
            self.config["default_sort_field"] = default_sort_field
        if default_sort_direction is not None:
            self.config["default_sort_direction"] = default_sort_direction
        if require_reference_fields is not None:
            self.config["require_reference_fields"] = require_reference_fields
        if log_level is not None:
            self.config["log_level"] = log_level
        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None


CONFIGURATION_REPO = ConfigurationRepository()
