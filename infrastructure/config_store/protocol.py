"""ConfigurationStore protocol — the guard only ever calls get()."""

from typing import Any, Mapping, Protocol, Union

from schemas.models.guard_config import GuardConfig


class ConfigurationStore(Protocol):
    def get(self) -> GuardConfig: ...

    def set(self, config: Union[GuardConfig, Mapping[str, Any]]) -> GuardConfig: ...
