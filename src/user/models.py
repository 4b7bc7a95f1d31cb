from sqlalchemy import Boolean, Index, String, false
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base
from src.core.database.mixins import IntegerIDMixin, TimestampMixin


class User(Base, IntegerIDMixin, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (Index("uq_users_email", "email", unique=True),)

    name: Mapped[str] = mapped_column(String(255))
    # Stored already normalized (stripped, lowercase); see EmailNormalizationMixin.
    email: Mapped[str] = mapped_column(String(255))
    disabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r}, email={self.email!r})>"
