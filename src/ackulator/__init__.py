import collections.abc
import configparser
import json
import os
import pathlib

from ackulator.core import data
from ackulator.core import iotools


# read version from installed package
from importlib.metadata import version
__version__ = version("ackulator")


DEFAULTS = {
    'ambiguity': data.Ambiguity.PREFER_VALUES.value,
    'prelude': 'yes',
}
"""Settings that apply when no configuration file overrides them."""


class Environment(collections.abc.Mapping):
    """A collection of environmental settings."""

    def __init__(self, name: str='ackulator') -> None:
        self.name = name
        """The name of the configuration section to read."""
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            '/etc/ackulator', # Linux standard (global)
            os.environ.get('ACKULATOR_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        config = configparser.ConfigParser(defaults=DEFAULTS)
        path = iotools.search(paths, 'ackulator.ini')
        if path is not None:
            config.read(path)
        if not config.has_section(self.name):
            config.add_section(self.name)
        self._config = config[self.name]
        self.path = path

    @property
    def ambiguity(self) -> data.Ambiguity:
        """The default policy for names defined in several namespaces."""
        value = self._config['ambiguity'].strip().lower()
        try:
            return data.Ambiguity(value)
        except ValueError:
            raise ValueError(
                f"Unknown ambiguity policy {value!r} in {self.path}"
            ) from None

    @property
    def prelude(self) -> bool:
        """True if sessions should start from the standard declarations."""
        return self._config.getboolean('prelude')

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"{self.name} has no value for {key!r}"
        ) from None

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{self.name}({self.path}):\n{self}"
