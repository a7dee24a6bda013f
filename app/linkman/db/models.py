import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

PUBLIC_MARKER = "public"

ACE_USER = "user"
ACE_ROLE = "role"
ACE_GROUP = "group"

GROUP_MEMBER = "member"
GROUP_OWNER = "owner"


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class CategoryRecord(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(75), nullable=False)
    translations: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    acl_owner: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    matches_guest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    # Set to PUBLIC_MARKER on the public category only; the unique index allows a single one.
    public_marker: Mapped[str | None] = mapped_column(String(16), nullable=True, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    principals = relationship(
        "CategoryPrincipalRecord",
        back_populates="category",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class CategoryPrincipalRecord(Base):
    __tablename__ = "category_principals"
    __table_args__ = (
        UniqueConstraint("category_id", "kind", "value", name="uq_category_principal"),
        Index("ix_category_principals_kind_value", "kind", "value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)

    category = relationship("CategoryRecord", back_populates="principals")


class LinkRecord(Base):
    __tablename__ = "links"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    href: Mapped[str] = mapped_column(String(2048), nullable=False)
    blank: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    display_text: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    text: Mapped[str] = mapped_column(String(75), nullable=False)
    text_translations: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description_translations: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    acl_owner: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    matches_guest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    card_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    menu_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    principals = relationship(
        "LinkPrincipalRecord",
        back_populates="link",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    categories = relationship(
        "LinkCategoryRecord",
        back_populates="link",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class LinkPrincipalRecord(Base):
    __tablename__ = "link_principals"
    __table_args__ = (
        UniqueConstraint("link_id", "kind", "value", name="uq_link_principal"),
        Index("ix_link_principals_kind_value", "kind", "value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    link_id: Mapped[str] = mapped_column(String(36), ForeignKey("links.id", ondelete="CASCADE"), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)

    link = relationship("LinkRecord", back_populates="principals")


class LinkCategoryRecord(Base):
    __tablename__ = "link_categories"

    link_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("links.id", ondelete="CASCADE"), primary_key=True
    )
    # No foreign key: references are cleaned up explicitly when a category is deleted.
    category_id: Mapped[str] = mapped_column(String(36), primary_key=True, index=True)

    link = relationship("LinkRecord", back_populates="categories")


class GroupRecord(Base):
    __tablename__ = "groups"
    __table_args__ = (UniqueConstraint("created_by", "name", name="uq_groups_creator_name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    source: Mapped[str] = mapped_column(String(16), nullable=False, default="INTERNAL")
    name: Mapped[str] = mapped_column(String(75), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    principals = relationship(
        "GroupPrincipalRecord",
        back_populates="group",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class GroupPrincipalRecord(Base):
    __tablename__ = "group_principals"
    __table_args__ = (
        UniqueConstraint("group_id", "kind", "value", name="uq_group_principal"),
        Index("ix_group_principals_kind_value", "kind", "value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[str] = mapped_column(String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)

    group = relationship("GroupRecord", back_populates="principals")
