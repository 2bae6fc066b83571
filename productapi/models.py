# productapi/models.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200


def text_length(value: str) -> int:
    """Length in UTF-16 code units, the unit browsers and MongoDB clients count in."""
    return len(value.encode("utf-16-le")) // 2


class ProductCreate(BaseModel):
    """A product as built by the create handler, before the store assigns an id."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    video_url: Optional[str] = Field(None, alias="videoUrl")

    @field_validator("title")
    @classmethod
    def _title_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and text_length(v) > TITLE_MAX_LENGTH:
            raise ValueError(f"title is longer than {TITLE_MAX_LENGTH}")
        return v

    @field_validator("description")
    @classmethod
    def _description_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and text_length(v) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"description is longer than {DESCRIPTION_MAX_LENGTH}")
        return v


class Product(ProductCreate):
    id: str


class ErrorOut(BaseModel):
    error: str
