import pytest
from pydantic import ValidationError

from studentdb.core.models import Record


def test_new_record_has_no_id():
    record = Record(name="Alice")
    assert record.id is None
    assert not record.is_persisted


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_name_is_rejected(name):
    with pytest.raises(ValidationError):
        Record(name=name)


def test_name_is_required():
    with pytest.raises(ValidationError):
        Record()


def test_records_are_frozen():
    record = Record(id=1, name="Alice")
    with pytest.raises(ValidationError):
        record.name = "Bob"


def test_identity_is_the_id():
    a = Record(id=3, name="Alice")
    renamed = a.with_name("Alicia")
    assert a.same_entity(renamed)
    assert a != renamed
    assert not Record(name="Alice").same_entity(Record(name="Alice"))
    assert not a.same_entity(Record(id=4, name="Alice"))


def test_with_name_validates():
    with pytest.raises(ValidationError):
        Record(id=1, name="Alice").with_name("")


def test_with_id_keeps_name():
    assert Record(name="Bob").with_id(7) == Record(id=7, name="Bob")


def test_with_id_validates():
    with pytest.raises(ValidationError):
        Record(name="Bob").with_id("x")


def test_str_matches_log_format():
    assert str(Record(id=2, name="Bob")) == "Student{id=2, name='Bob'}"
