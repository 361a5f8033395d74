"""Adoption listings - independent of the pet/like/match graph."""

import enum
from typing import List

from sqlalchemy import Boolean, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from petcrush.common.base import Base, TimestampMixin, get_table_args, get_table_ref


class AdoptionStatus(str, enum.Enum):
    DISPONIVEL = "DISPONIVEL"
    ADOTADO = "ADOTADO"


class AdoptionPost(Base, TimestampMixin):
    __tablename__ = "adoption_posts"
    __table_args__ = get_table_args(
        Index("idx_adoption_posts_owner", "owner_id"),
        Index("idx_adoption_posts_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey(get_table_ref("users") + ".id"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    species: Mapped[str] = mapped_column(String(40), nullable=False)
    breed: Mapped[str] = mapped_column(String(120), nullable=False)
    age_label: Mapped[str] = mapped_column(String(60), nullable=False)  # free text, e.g. "2 anos"

    country: Mapped[str] = mapped_column(String(80), nullable=False)
    state: Mapped[str] = mapped_column(String(80), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)

    pedigree: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    neutered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    contact: Mapped[str] = mapped_column(String(200), nullable=False)
    photos: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AdoptionStatus.DISPONIVEL.value)
