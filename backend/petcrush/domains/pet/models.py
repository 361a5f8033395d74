"""Pet profile model."""

import enum
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, JSON, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from petcrush.common.base import Base, TimestampMixin, get_table_args, get_table_ref


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class Size(str, enum.Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class Objective(str, enum.Enum):
    BREEDING = "BREEDING"
    COMPANIONSHIP = "COMPANIONSHIP"
    SOCIALIZATION = "SOCIALIZATION"


MIN_PHOTOS = 3
MIN_VIDEO_SECONDS = 5


class Pet(Base, TimestampMixin):
    """
    A pet profile owned by exactly one user.

    At most one pet per owner carries ``is_active``; the partial unique
    index below backs that up at the database level.
    """

    __tablename__ = "pets"
    __table_args__ = get_table_args(
        Index("idx_pets_owner", "owner_id"),
        Index("idx_pets_feed", "species", "gender", "objective"),
        Index(
            "uq_pets_owner_active",
            "owner_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        CheckConstraint("age_months >= 0", name="ck_pets_age_months"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey(get_table_ref("users") + ".id"),
        nullable=False
    )

    display_name: Mapped[str] = mapped_column(String(120), nullable=False)
    species: Mapped[str] = mapped_column(String(40), nullable=False)
    breed: Mapped[str] = mapped_column(String(120), nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)  # Gender
    size: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # Size
    colors: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    age_months: Mapped[int] = mapped_column(Integer, nullable=False)

    pedigree: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    vaccinated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    trained: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    neutered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    health_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    objective: Mapped[str] = mapped_column(String(20), nullable=False)  # Objective
    is_donation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Location
    region: Mapped[str] = mapped_column(String(160), nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    neighborhood: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    about: Mapped[str] = mapped_column(Text, nullable=False)
    photos: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    video_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    video_duration: Mapped[float] = mapped_column(nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Pet id={self.id} owner={self.owner_id} name={self.display_name}>"
