from pagewalk import Record
from pagewalk.core.search import apply_search, matches


def test_case_insensitive_substring():
    assert matches({"name": "Ana Reyes"}, "REY", ["name"])


def test_any_field_matches():
    item = {"name": "Ana", "email": "reyes@school.test"}
    assert matches(item, "reyes", ["name", "email"])
    assert not matches(item, "reyes", ["name"])


def test_missing_and_non_string_fields():
    assert not matches({"name": None}, "a", ["name"])
    assert not matches({"grade": 11}, "11", ["grade"])
    assert not matches({}, "a", ["name"])


def test_blank_term_keeps_everything():
    items = [{"name": "Ana"}, {"name": "Bob"}]
    assert apply_search(items, "  ", ["name"]) == items


def test_no_fields_keeps_everything():
    items = [{"name": "Ana"}, {"name": "Bob"}]
    assert apply_search(items, "zzz", []) == items


def test_filters_in_order():
    items = [{"name": "Ana"}, {"name": "Bob"}, {"name": "Diana"}]
    assert apply_search(items, "an", ["name"]) == [{"name": "Ana"}, {"name": "Diana"}]


def test_objects_are_searched_by_attribute():
    class Adviser(Record):
        first_name: str

    advisers = [Adviser(_id="t1", first_name="Maria"), Adviser(_id="t2", first_name="Jose")]
    assert apply_search(advisers, "mar", ["first_name"]) == [advisers[0]]
