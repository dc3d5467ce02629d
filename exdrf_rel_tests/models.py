from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default="member")

    posts: Mapped[List["Post"]] = relationship(
        "Post", back_populates="user", foreign_keys="Post.user_id"
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.username}>"


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    # The attribute and the column have different names.
    editor_ref: Mapped[Optional[int]] = mapped_column(
        "editor_id", Integer, ForeignKey("users.id"), nullable=True
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="posts", foreign_keys=[user_id]
    )
    editor: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[editor_ref]
    )
