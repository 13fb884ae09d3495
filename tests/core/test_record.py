from bson import ObjectId

from pagewalk import Record
from pagewalk.core.record import _record_registry
from pagewalk.utils.settings import SettingsResolver
from pagewalk.core.query import SortDirection


class Section(Record):
    name: str
    adviser: str | None = None

    class Settings:
        collection = "class_sections"
        connection_alias = "school"
        search_fields = ("name", "adviser")
        order_by = "name"
        page_size = 15


class Strand(Record):
    code: str


class Faculty(Record):
    name: str


def test_object_id_becomes_string():
    oid = ObjectId()
    section = Section.from_document({"_id": oid, "name": "Rizal"})
    assert section.id == str(oid)


def test_unknown_fields_are_kept():
    section = Section.from_document({"_id": "x", "name": "Rizal", "room": "204"})
    assert section.room == "204"


def test_subclasses_are_registered():
    assert _record_registry["Section"] is Section


def test_settings_resolution():
    assert Section._collection_name == "class_sections"
    assert Section._connection_alias == "school"
    assert SettingsResolver.get_search_fields(Section) == frozenset({"name", "adviser"})
    assert SettingsResolver.get_ordering(Section) == ("name", SortDirection.ASCENDING)
    assert SettingsResolver.get_page_size(Section) == 15


def test_settings_defaults():
    assert Strand._collection_name == "strands"
    assert Strand._connection_alias == "default"
    assert SettingsResolver.get_search_fields(Strand) == frozenset()
    assert SettingsResolver.get_ordering(Strand) == ("_id", SortDirection.ASCENDING)
    assert SettingsResolver.get_page_size(Strand) == 20


def test_pluralization():
    assert Faculty._collection_name == "faculties"
