from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from people_directory.schemas import PeopleEnvelope, Person


def test_person_ignores_unknown_keys_and_casing() -> None:
    person = Person.model_validate(
        {
            "@odata.context": "$metadata#People/$entity",
            "USERNAME": "jdoe",
            "firstName": "John",
            "last_name": "Doe",
            "Emails": ["other@example.com"],
            "middlename": "Q",
        }
    )

    assert person.user_name == "jdoe"
    assert person.first_name == "John"
    assert person.last_name == "Doe"
    assert person.middle_name == "Q"
    assert person.email == ""


def test_person_requires_user_name() -> None:
    with pytest.raises(ValidationError):
        Person.model_validate({"FirstName": "John"})


def test_person_null_strings_decode_as_empty() -> None:
    person = Person.model_validate({"UserName": "jdoe", "Email": None, "Address": None})

    assert person.email == ""
    assert person.address == ""


def test_person_date_of_birth_drops_time_part() -> None:
    person = Person.model_validate({"UserName": "jdoe", "DateOfBirth": "1990-05-01T00:00:00Z"})

    assert person.date_of_birth == date(1990, 5, 1)


def test_person_is_immutable() -> None:
    person = Person(user_name="jdoe", first_name="John")

    with pytest.raises(ValidationError):
        person.first_name = "Jack"


def test_with_changes_returns_modified_copy() -> None:
    person = Person(user_name="jdoe", first_name="John", last_name="Doe", email="j@example.com")

    changed = person.with_changes(last_name="Smith")

    assert changed is not person
    assert changed.user_name == "jdoe"
    assert changed.first_name == "John"
    assert changed.last_name == "Smith"
    assert changed.email == "j@example.com"
    assert person.last_name == "Doe"


def test_with_changes_keeps_user_name_fixed() -> None:
    person = Person(user_name="jdoe")

    with pytest.raises(ValueError, match="cannot be changed"):
        person.with_changes(user_name="someone-else")
    with pytest.raises(ValueError, match="Unknown person fields"):
        person.with_changes(nickname="JD")


def test_to_payload_uses_wire_names() -> None:
    person = Person(user_name="jdoe", first_name="John", last_name="Doe", date_of_birth=date(1990, 5, 1))

    assert person.to_payload() == {
        "UserName": "jdoe",
        "FirstName": "John",
        "LastName": "Doe",
        "MiddleName": None,
        "Email": "",
        "Address": "",
        "DateOfBirth": "1990-05-01",
    }


def test_envelope_value_is_case_insensitive() -> None:
    envelope = PeopleEnvelope.model_validate({"Value": [{"UserName": "a"}, {"userName": "b"}]})

    assert [p.user_name for p in envelope.value] == ["a", "b"]
