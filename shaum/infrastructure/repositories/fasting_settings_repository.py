"""
Fasting Settings Repository
Load/save Nadzar, Qadha and Ramadhan override configuration
"""

import logging
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from shaum.domain.models import FastingPreferences, RamadhanOverride, RecurrenceConfig
from shaum.domain.schemas.fasting import RamadhanOverridePayload, RecurrenceConfigPayload
from shaum.exceptions import ConfigValidationError
from shaum.infrastructure.store.config_store import ConfigStore

logger = logging.getLogger(__name__)

NADZAR_CONFIG_KEY = "nadzar_config"
QADHA_CONFIG_KEY = "qadha_config"
RAMADHAN_CONFIG_KEY = "ramadhan_config"

ChangeListener = Callable[[str], None]


class FastingSettingsRepository:
    """Repository for the user's fasting configuration"""

    def __init__(self, store: ConfigStore):
        """Initialize with a key-value config store"""
        self.store = store
        self._listeners: List[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the changed key after each save"""
        self._listeners.append(listener)

    def _notify(self, key: str) -> None:
        for listener in self._listeners:
            listener(key)

    async def _load_payload(self, key: str, schema) -> Optional[Any]:
        raw = await self.store.get_json(key)
        if raw is None:
            return None
        try:
            return schema.model_validate(raw)
        except ValidationError as exc:
            logger.warning("FASTING_CONFIG_UNREADABLE | key=%s | error=%s", key, exc.errors())
            return None

    async def get_nadzar_config(self) -> RecurrenceConfig:
        payload = await self._load_payload(NADZAR_CONFIG_KEY, RecurrenceConfigPayload)
        return payload.to_domain() if payload else RecurrenceConfig()

    async def get_qadha_config(self) -> RecurrenceConfig:
        payload = await self._load_payload(QADHA_CONFIG_KEY, RecurrenceConfigPayload)
        return payload.to_domain() if payload else RecurrenceConfig()

    async def get_ramadhan_override(self) -> Optional[RamadhanOverride]:
        payload = await self._load_payload(RAMADHAN_CONFIG_KEY, RamadhanOverridePayload)
        return payload.to_domain() if payload else None

    async def get_preferences(self) -> FastingPreferences:
        return FastingPreferences(
            nadzar=await self.get_nadzar_config(),
            qadha=await self.get_qadha_config(),
            ramadhan_override=await self.get_ramadhan_override(),
        )

    async def save_nadzar_config(self, raw: Any) -> RecurrenceConfig:
        return await self._save_recurrence(raw, NADZAR_CONFIG_KEY, QADHA_CONFIG_KEY)

    async def save_qadha_config(self, raw: Any) -> RecurrenceConfig:
        return await self._save_recurrence(raw, QADHA_CONFIG_KEY, NADZAR_CONFIG_KEY)

    async def _save_recurrence(self, raw: Any, key: str, opposing_key: str) -> RecurrenceConfig:
        """
        Validate and persist one schedule

        A trigger type can only count toward one obligation, so types claimed
        here are dropped from the opposing schedule.
        """
        config = self._validate(RecurrenceConfigPayload, raw).to_domain()

        opposing = await self._load_payload(opposing_key, RecurrenceConfigPayload)
        if opposing is not None:
            opposing_config = opposing.to_domain()
            moved = opposing_config.trigger_types & config.trigger_types
            if moved:
                logger.info(
                    "FASTING_TRIGGER_MOVED | from=%s | to=%s | types=%s",
                    opposing_key,
                    key,
                    sorted(t.value for t in moved),
                )
                trimmed = opposing_config.without_triggers(moved)
                await self.store.set_json(
                    opposing_key,
                    RecurrenceConfigPayload.from_domain(trimmed).to_store(),
                )
                self._notify(opposing_key)

        await self.store.set_json(key, RecurrenceConfigPayload.from_domain(config).to_store())
        self._notify(key)
        return config

    async def save_ramadhan_override(self, raw: Any) -> Optional[RamadhanOverride]:
        payload = self._validate(RamadhanOverridePayload, raw)
        await self.store.set_json(RAMADHAN_CONFIG_KEY, payload.to_store())
        self._notify(RAMADHAN_CONFIG_KEY)
        return payload.to_domain()

    async def clear_ramadhan_override(self) -> None:
        await self.store.delete(RAMADHAN_CONFIG_KEY)
        self._notify(RAMADHAN_CONFIG_KEY)

    @staticmethod
    def _validate(schema, raw: Any):
        try:
            return schema.model_validate(raw)
        except ValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc
