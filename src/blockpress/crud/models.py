"""Database table definitions for stored articles"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class Article(SQLModel, table=True):
    """An article's raw source content; blocks are re-parsed from it on every render"""
    __tablename__ = "articles"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., index=True, unique=True, nullable=False)
    title: str = Field(..., nullable=False)
    category: Optional[str] = Field(default=None)
    accent_color: Optional[str] = Field(default=None, sa_column=Column(String(16), nullable=True))
    excerpt: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    published: bool = Field(default=True, nullable=False)
    published_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
