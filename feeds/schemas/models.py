"""
Pydantic models for parsed feed entries.
These are the parser-neutral shape every syndication library output is mapped
into before normalization.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator


class Enclosure(BaseModel):
    url: str
    type: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return bool(self.type) and self.type.lower().startswith("image/")


class RawItem(BaseModel):
    title: str = ""
    link: Optional[str] = None
    guid: Optional[str] = None
    published: Optional[datetime] = None
    published_raw: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    media_content: Optional[str] = None
    media_thumbnail: Optional[str] = None
    enclosures: List[Enclosure] = []
    categories: List[str] = []

    @field_validator("title", mode="before")
    @classmethod
    def _trim_title(cls, value: Optional[str]) -> str:
        return (value or "").strip()

    @field_validator("link", "guid", "author", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class ParsedFeed(BaseModel):
    title: Optional[str] = None
    link: Optional[str] = None
    items: List[RawItem] = []
