"""In-process implementation of ConfigurationStore.

Holds a single frozen GuardConfig. set() swaps the reference, so a reader
always sees either the old snapshot or the new one, never a mix.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from schemas.models.guard_config import GuardConfig
from shared.logging import get_logger

log = get_logger(__name__)


class InMemoryConfigurationStore:
    def __init__(self, initial: Optional[GuardConfig] = None) -> None:
        self._config = initial if initial is not None else GuardConfig()

    def get(self) -> GuardConfig:
        return self._config

    def set(self, config: Union[GuardConfig, Mapping[str, Any]]) -> GuardConfig:
        """Replace the stored configuration.

        A mapping is treated like raw settings-form input: text fields are
        stripped and missing flags read as unchecked (False).
        """
        if not isinstance(config, GuardConfig):
            raw = dict(config)
            for flag in ("enable_login", "enable_register", "enable_comment"):
                raw.setdefault(flag, False)
            config = GuardConfig.model_validate(raw)
        self._config = config
        log.info(
            "guard_config_updated",
            site_configured=bool(config.site_key),
            verification_configured=config.has_secret,
            enable_login=config.enable_login,
            enable_register=config.enable_register,
            enable_comment=config.enable_comment,
        )
        return config
