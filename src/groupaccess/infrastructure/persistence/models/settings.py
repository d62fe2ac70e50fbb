"""SQLAlchemy model for the settings table.

Each row holds one named settings object as a JSON document.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from groupaccess.infrastructure.persistence.database import Base


class SettingsModel(Base):
    """SQLAlchemy model for the settings table.

    Attributes:
        key: Settings object name (e.g., 'groupaccess.settings').
        data: Settings values.
        updated_at: Timestamp when the settings were last saved.
    """

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Settings object name",
    )
    data: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
        comment="Settings values",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Settings(key={self.key})>"
