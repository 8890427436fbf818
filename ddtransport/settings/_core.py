from collections import ChainMap
from enum import Enum
import os
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from envier import Env


class ValueSource(str, Enum):
    ENV_VAR = "env_var"
    CODE = "code"
    DEFAULT = "default"
    UNKNOWN = "unknown"


class DDConfig(Env):
    """Provides support for loading configurations from the environment and from code."""

    def __init__(
        self,
        source: Optional[Dict[str, str]] = None,
        parent: Optional["Env"] = None,
        dynamic: Optional[Dict[str, str]] = None,
    ) -> None:
        self.env_source = os.environ

        # Order of precedence: provided source < environment variables
        full_source = ChainMap(self.env_source, source or {})

        # Parse the configuration and initialize the values
        super().__init__(source=full_source, parent=parent, dynamic=dynamic)

        # Initialize the value sources
        self._value_source = {}

        for name, e in type(self).items(recursive=True):
            if e.private:
                continue

            env_name = e.full_name

            # Get the item value recursively
            env_val = self
            for p in name.split("."):
                env_val = getattr(env_val, p)

            if env_name in self.env_source:
                value_source = ValueSource.ENV_VAR
            elif source is not None and env_name in source:
                value_source = ValueSource.CODE
            elif env_val == e.default:
                value_source = ValueSource.DEFAULT
            else:
                value_source = ValueSource.UNKNOWN

            self._value_source[env_name] = value_source

    def value_source(self, env_name: str) -> ValueSource:
        return self._value_source.get(env_name, ValueSource.UNKNOWN)
