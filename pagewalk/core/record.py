from __future__ import annotations

from typing import Any, ClassVar, Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from pagewalk.utils.settings import SettingsResolver

# Global registry mapping class name -> Record subclass
_record_registry: dict[str, type[Record]] = {}


class Record(BaseModel):
    """Base model for browsed documents.

    Any stored document with an id can be browsed as a plain dict; subclass
    Record to get validation and per-collection settings instead::

        class Student(Record):
            first_name: str
            email: str

            class Settings:
                collection = "students"
                order_by = "-createdAt"
                search_fields = ("first_name", "email")
                page_size = 10
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: Optional[str] = Field(default=None, alias="_id")

    _collection_name: ClassVar[str] = ""
    _connection_alias: ClassVar[str] = "default"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._collection_name = SettingsResolver.get_collection_name(cls)
        cls._connection_alias = SettingsResolver.get_connection_alias(cls)
        _record_registry[cls.__name__] = cls

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_object_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Record:
        """Validate a raw stored document."""
        return cls.model_validate(data)
