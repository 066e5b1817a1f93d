import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from core.types import WatchlistDocument
from models.base import Base

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Watchlist(Base):
    """One row per user holding the whole watchlist document."""

    __tablename__ = "watchlists"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), unique=True, nullable=False, index=True
    )
    items: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    custom_folders: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def to_document(self) -> WatchlistDocument:
        return WatchlistDocument.model_validate(
            {
                "userId": str(self.user_id),
                "items": self.items or [],
                "customFolders": self.custom_folders or [],
            }
        )

    def apply_document(self, document: WatchlistDocument) -> None:
        # Reassign whole lists so the JSON columns are flagged dirty
        data = document.dump()
        self.items = data["items"]
        self.custom_folders = data["customFolders"]
