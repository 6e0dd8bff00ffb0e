"""
Action/environment pairs and the RightScripts that implement them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Union

from elbman.errors import ConfigurationError
from elbman.io.credentials import DEFAULT_RIGHT_SCRIPTS

RIGHT_SCRIPT_PREFIX = "/api/right_scripts/"


class Action(str, enum.Enum):
    ADD = "add"
    REMOVE = "remove"

    @classmethod
    def parse(cls, value: Union["Action", str, None]) -> "Action":
        if isinstance(value, Action):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            normalized = _ACTION_ALIASES.get(normalized, normalized)
            for action in cls:
                if action.value == normalized:
                    return action
        raise ConfigurationError("action must be attach or remove")

    @property
    def verb(self) -> str:
        if self is Action.ADD:
            return "Adding %s to %s"
        return "Removing %s from %s"


_ACTION_ALIASES = {"attach": "add", "detach": "remove"}


class Environment(str, enum.Enum):
    STAGING = "staging"
    PROD = "prod"

    @classmethod
    def parse(cls, value: Union["Environment", str, None]) -> "Environment":
        if isinstance(value, Environment):
            return value
        if isinstance(value, str):
            for env in cls:
                if env.value == value.strip().lower():
                    return env
        raise ConfigurationError("env must be staging or prod.")


@dataclass(frozen=True)
class OperationSpec:
    action: Action
    environment: Environment

    @classmethod
    def of(cls, action, environment) -> "OperationSpec":
        return cls(Action.parse(action), Environment.parse(environment))

    def __str__(self) -> str:
        return f"{self.action.value}/{self.environment.value}"


def normalize_script_href(script: Union[str, int]) -> str:
    """Accept a bare RightScript id or a full href and return the href."""
    script = str(script).strip()
    if not script:
        raise ConfigurationError("RightScript identifier must not be empty")
    if script.isdigit():
        return RIGHT_SCRIPT_PREFIX + script
    return script


class ScriptTable(Mapping[OperationSpec, str]):
    """
    Finite mapping of every supported :class:`OperationSpec` to a RightScript href.

    The table is complete or it is not built at all: a missing pair raises
    :class:`ConfigurationError` at construction, before any API call.
    """

    def __init__(self, scripts: Dict[OperationSpec, str]):
        self._scripts = {spec: normalize_script_href(href) for spec, href in scripts.items()}
        missing = [str(spec) for spec in self.supported() if spec not in self._scripts]
        if missing:
            raise ConfigurationError(
                "No RightScript configured for: " + ", ".join(sorted(missing))
            )

    @staticmethod
    def supported() -> Iterator[OperationSpec]:
        for action in Action:
            for env in Environment:
                yield OperationSpec(action, env)

    @classmethod
    def from_mapping(cls, table: Mapping[str, Mapping[str, Union[str, int]]]) -> "ScriptTable":
        """
        Build from the two-level ``table[action][environment]`` layout used in
        settings files.
        """
        scripts: Dict[OperationSpec, str] = {}
        for action, by_env in table.items():
            if not isinstance(by_env, Mapping):
                raise ConfigurationError(f"RightScripts for {action!r} must be a mapping")
            for env, script in by_env.items():
                scripts[OperationSpec.of(action, env)] = script
        return cls(scripts)

    @classmethod
    def default(cls) -> "ScriptTable":
        return cls.from_mapping(DEFAULT_RIGHT_SCRIPTS)

    def resolve(self, action, environment) -> str:
        spec = OperationSpec.of(action, environment)
        href: Optional[str] = self._scripts.get(spec)
        if href is None:
            raise ConfigurationError(f"No RightScript configured for {spec}")
        return href

    def __getitem__(self, spec: OperationSpec) -> str:
        return self._scripts[spec]

    def __iter__(self):
        return iter(self._scripts)

    def __len__(self) -> int:
        return len(self._scripts)
