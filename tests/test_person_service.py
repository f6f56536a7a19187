"""Tests for person search and registration."""

import pytest

from errors import Forbidden, InvalidInput
from models.person import Person
from services.person_service import PersonService


class FakePersonRepo:
    def __init__(self, national_ids=()):
        self.national_ids = set(national_ids)
        self.added: list[Person] = []
        self.searches: list[dict] = []

    def exists_with_national_id(self, national_id):
        return national_id in self.national_ids

    def add(self, person):
        person.id = len(self.added) + 1
        self.added.append(person)
        return person

    def search(self, term=None, station_id=None, limit=200):
        self.searches.append({"term": term, "station_id": station_id, "limit": limit})
        return []


@pytest.fixture
def repo():
    return FakePersonRepo(national_ids={"NP-123"})


def test_officer_adds_person(repo, officer):
    person = PersonService(repo).add_person(officer, Person("Hari", "Thapa", national_id="NP-456"))
    assert person.id == 1
    assert str(person) == "#1 Hari Thapa (NP-456)"


def test_admin_cannot_add_person(repo, admin):
    with pytest.raises(Forbidden):
        PersonService(repo).add_person(admin, Person("Hari", "Thapa"))
    assert repo.added == []


def test_names_are_required(repo, officer):
    with pytest.raises(InvalidInput):
        PersonService(repo).add_person(officer, Person("Hari", ""))


def test_duplicate_national_id(repo, officer):
    with pytest.raises(InvalidInput, match="National ID"):
        PersonService(repo).add_person(officer, Person("Sita", "Rai", national_id="NP-123"))


def test_search_strips_blank_terms(repo, admin):
    PersonService(repo).search(admin, term="   ")
    PersonService(repo).search(admin, term=" thapa ", limit=5)
    assert repo.searches == [
        {"term": None, "station_id": None, "limit": 20},
        {"term": "thapa", "station_id": None, "limit": 5},
    ]
