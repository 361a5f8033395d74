"""Likes, matches and chat messages."""

from typing import Tuple

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from petcrush.common.base import Base, CreatedAtMixin, get_table_args, get_table_ref


class Like(Base, CreatedAtMixin):
    """Directed interest from one pet to another; never mutated."""

    __tablename__ = "likes"
    __table_args__ = get_table_args(
        UniqueConstraint("liker_pet_id", "target_pet_id", name="uq_likes_liker_target"),
        CheckConstraint("liker_pet_id <> target_pet_id", name="ck_likes_not_self"),
        Index("idx_likes_target", "target_pet_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    liker_pet_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(get_table_ref("pets") + ".id"), nullable=False
    )
    target_pet_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(get_table_ref("pets") + ".id"), nullable=False
    )


class Match(Base, CreatedAtMixin):
    """
    Undirected pair of pets that liked each other.

    Stored as the canonical ``(pet_low_id, pet_high_id)`` pair under a unique
    constraint so both orders of a reciprocal like resolve to the same row.
    """

    __tablename__ = "matches"
    __table_args__ = get_table_args(
        UniqueConstraint("pet_low_id", "pet_high_id", name="uq_matches_pair"),
        CheckConstraint("pet_low_id < pet_high_id", name="ck_matches_canonical"),
        Index("idx_matches_high", "pet_high_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pet_low_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(get_table_ref("pets") + ".id"), nullable=False
    )
    pet_high_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(get_table_ref("pets") + ".id"), nullable=False
    )

    @property
    def pet_ids(self) -> Tuple[int, int]:
        return self.pet_low_id, self.pet_high_id


class Message(Base, CreatedAtMixin):
    __tablename__ = "messages"
    __table_args__ = get_table_args(
        Index("idx_messages_match_created", "match_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(get_table_ref("matches") + ".id"), nullable=False
    )
    sender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey(get_table_ref("users") + ".id"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
