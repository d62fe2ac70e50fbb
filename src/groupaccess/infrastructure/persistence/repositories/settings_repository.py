"""Settings repository.

Named settings objects are stored as JSON documents. Readers get an
immutable snapshot; writers get an editable handle that is persisted with
save().
"""

from copy import deepcopy
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groupaccess.core.logging import get_logger
from groupaccess.infrastructure.persistence.models import SettingsModel

logger = get_logger(__name__)


class Config:
    """Read-only snapshot of a settings object."""

    def __init__(self, key: str, data: dict[str, Any]) -> None:
        self.key = key
        self._data = data

    def get(self, field: str | None = None, default: Any = None) -> Any:
        """Get a copy of one value, or of the whole object when field is None."""
        if field is None:
            return deepcopy(self._data)
        return deepcopy(self._data.get(field, default))

    def is_new(self) -> bool:
        return not self._data


class EditableConfig(Config):
    """Mutable handle on a settings object."""

    def __init__(self, key: str, data: dict[str, Any], repository: "SettingsRepository") -> None:
        super().__init__(key, data)
        self._repository = repository

    def set(self, field: str, value: Any) -> "EditableConfig":
        self._data[field] = deepcopy(value)
        return self

    def clear(self, field: str) -> "EditableConfig":
        self._data.pop(field, None)
        return self

    async def save(self) -> bool:
        """Persist the settings object.

        Returns:
            True once the values were written.
        """
        await self._repository.write(self.key, self._data)
        return True


class SettingsRepository:
    """Repository for settings objects."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _load(self, key: str) -> SettingsModel | None:
        result = await self.session.execute(
            select(SettingsModel).where(SettingsModel.key == key)
        )
        return result.scalar_one_or_none()

    async def get(self, key: str) -> Config:
        """Get a read-only snapshot of a settings object.

        Missing objects are returned empty.
        """
        model = await self._load(key)
        return Config(key, deepcopy(model.data) if model else {})

    async def get_editable(self, key: str) -> EditableConfig:
        """Get an editable handle on a settings object."""
        model = await self._load(key)
        return EditableConfig(key, deepcopy(model.data) if model else {}, self)

    async def write(self, key: str, data: dict[str, Any]) -> None:
        """Insert or replace a settings object."""
        model = await self._load(key)
        if model is None:
            model = SettingsModel(key=key, data=deepcopy(data))
            self.session.add(model)
        else:
            # Assign a new object so the JSON column is flagged as modified
            model.data = deepcopy(data)
        await self.session.flush()
        logger.debug("Settings saved", settings_key=key)
