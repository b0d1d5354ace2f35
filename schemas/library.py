"""Snippet and collection schemas."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

SnippetType = Literal[
    "intro",
    "value_prop",
    "social_proof",
    "cta",
    "pain_point",
    "closing",
    "custom",
]


class SnippetCreate(BaseModel):
    name: str = Field(min_length=1)
    content: str = Field(min_length=1)
    snippet_type: Optional[SnippetType] = None
    tags: List[str] = Field(default_factory=list)


class SnippetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    snippet_type: Optional[SnippetType] = None
    tags: Optional[List[str]] = None

    @field_validator("name", "content", "tags")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class CollectionCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_public: bool = False
