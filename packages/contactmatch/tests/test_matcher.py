"""Tests for the contact matcher."""

import copy

from contactmatch.config import MatchConfig
from contactmatch.matcher import ContactMatcher, criteria_from_contact
from contactmatch.types import CandidateContact, MatchCriteria


def make_contact(contact_id: str, **fields) -> CandidateContact:
    return CandidateContact(id=contact_id, **fields)


class TestFindBestMatch:
    """Candidate selection and thresholds."""

    def test_match_with_email(self):
        criteria = MatchCriteria(
            first_name="John", last_name="Doe",
            email="john.doe@example.com", phone="555-123-4567",
        )
        contacts = [make_contact(
            "contact123", first_name="John", last_name="Doe",
            email="john.doe@example.com", phone="555-123-4567",
        )]

        result = ContactMatcher().find_best_match(criteria, contacts, 70)

        assert result is not None
        assert result.contact_id == "contact123"
        assert result.contact_name == "John Doe"
        assert result.confidence_score >= 70
        assert "email" in result.matched_fields

    def test_match_with_phone_only(self):
        criteria = MatchCriteria(phone="555-123-4567")
        contacts = [make_contact("contact456", first_name="Jane", last_name="Smith", phone="555-123-4567")]

        result = ContactMatcher().find_best_match(criteria, contacts, 25)

        assert result is not None
        assert result.contact_id == "contact456"
        assert result.matched_fields == ["phone"]

    def test_phone_formatting_ignored(self):
        criteria = MatchCriteria(phone="(555) 123-4567")
        contacts = [make_contact("contact789", phone="555-123-4567")]

        result = ContactMatcher().find_best_match(criteria, contacts, 25)

        assert result is not None
        assert "phone" in result.matched_fields

    def test_match_with_secondary_email(self):
        criteria = MatchCriteria(secondary_email="jane.work@company.com")
        contacts = [make_contact(
            "contact999", email="jane@personal.com", secondary_email="jane.work@company.com",
        )]

        result = ContactMatcher().find_best_match(criteria, contacts, 20)

        assert result is not None
        assert result.matched_fields == ["secondary_email"]
        assert result.confidence_score == 20

    def test_email_case_insensitive(self):
        criteria = MatchCriteria(email="JOHN.DOE@EXAMPLE.COM")
        contacts = [make_contact("contact123", email="john.doe@example.com")]

        result = ContactMatcher().find_best_match(criteria, contacts, 25)

        assert result is not None
        assert "email" in result.matched_fields

    def test_exact_confidence_score(self):
        criteria = MatchCriteria(email="test@example.com", phone="555-1234", first_name="John", last_name="Doe")
        contacts = [make_contact(
            "contact1", first_name="John", last_name="Doe", email="test@example.com", phone="555-1234",
        )]

        result = ContactMatcher().find_best_match(criteria, contacts, 0)

        assert result is not None
        assert result.confidence_score == 80
        assert result.matched_fields == ["email", "phone", "first_name", "last_name"]

    def test_selects_highest_score(self):
        criteria = MatchCriteria(
            first_name="John", last_name="Doe", email="john@example.com", phone="555-123-4567",
        )
        contacts = [
            make_contact("contact1", first_name="John", last_name="Smith",
                         email="john@example.com", phone="555-999-9999"),
            make_contact("contact2", first_name="John", last_name="Doe",
                         email="john@example.com", phone="555-123-4567"),
        ]

        result = ContactMatcher().find_best_match(criteria, contacts, 70)

        assert result is not None
        assert result.contact_id == "contact2"
        assert result.confidence_score == 80

    def test_below_threshold_returns_none(self):
        criteria = MatchCriteria(email="a@example.com")
        contacts = [make_contact("c1", email="a@example.com")]

        assert ContactMatcher().find_best_match(criteria, contacts, 70) is None

    def test_threshold_inclusive(self):
        criteria = MatchCriteria(email="a@example.com")
        contacts = [make_contact("c1", email="a@example.com")]

        result = ContactMatcher().find_best_match(criteria, contacts, 25)

        assert result is not None
        assert result.confidence_score == 25

    def test_default_threshold_from_config(self):
        config = MatchConfig()
        config.thresholds.min_confidence = 20
        criteria = MatchCriteria(email="a@example.com")
        contacts = [make_contact("c1", email="a@example.com")]

        assert ContactMatcher(config).find_best_match(criteria, contacts) is not None
        assert ContactMatcher().find_best_match(criteria, contacts) is None

    def test_empty_candidates(self):
        criteria = MatchCriteria(email="test@example.com")

        assert ContactMatcher().find_best_match(criteria, [], 70) is None
        assert ContactMatcher().find_best_match(criteria, [], 0) is None
        assert ContactMatcher().find_best_match(criteria, None, 0) is None

    def test_no_matched_fields_never_returned(self):
        criteria = MatchCriteria(email="nobody@example.com")
        contacts = [make_contact("c1", email="someone@example.com")]

        assert ContactMatcher().find_best_match(criteria, contacts, 0) is None

    def test_names_ignored_without_identifying_match(self):
        criteria = MatchCriteria(first_name="John", last_name="Doe")
        contacts = [make_contact(
            "contact123", first_name="John", last_name="Doe",
            email="jane@example.com", phone="555-999-9999",
        )]

        assert ContactMatcher().find_best_match(criteria, contacts, 70) is None
        assert ContactMatcher().find_best_match(criteria, contacts, 0) is None

    def test_unknown_contact_name(self):
        criteria = MatchCriteria(email="a@example.com")
        contacts = [make_contact("c1", email="a@example.com", first_name="  ", last_name=None)]

        result = ContactMatcher().find_best_match(criteria, contacts, 0)

        assert result is not None
        assert result.contact_name == "Unknown"

    def test_contact_name_single_part(self):
        criteria = MatchCriteria(email="a@example.com")
        contacts = [make_contact("c1", email="a@example.com", last_name="Doe")]

        result = ContactMatcher().find_best_match(criteria, contacts, 0)

        assert result.contact_name == "Doe"

    def test_result_carries_contact(self):
        contact = make_contact("c1", email="a@example.com")
        result = ContactMatcher().find_best_match(MatchCriteria(email="a@example.com"), [contact], 0)

        assert result.contact is contact


class TestTieBreak:
    """Equal scores keep candidate order."""

    def test_first_listed_wins(self):
        criteria = MatchCriteria(email="shared@example.com")
        a = make_contact("a", email="shared@example.com")
        b = make_contact("b", secondary_email="shared@example.com")

        assert ContactMatcher().find_best_match(criteria, [a, b], 0).contact_id == "a"
        assert ContactMatcher().find_best_match(criteria, [b, a], 0).contact_id == "b"

    def test_reordering_non_tied_keeps_winner(self):
        criteria = MatchCriteria(email="x@example.com", phone="555-0000")
        strong = make_contact("strong", email="x@example.com", phone="5550000")
        weak = make_contact("weak", email="x@example.com")

        assert ContactMatcher().find_best_match(criteria, [weak, strong], 0).contact_id == "strong"
        assert ContactMatcher().find_best_match(criteria, [strong, weak], 0).contact_id == "strong"


class TestFuzzyNames:
    """First names match through aliases and edit distance."""

    def _match(self, criteria_first: str, contact_first: str):
        criteria = MatchCriteria(first_name=criteria_first, email="person@example.com")
        contacts = [make_contact("c1", first_name=contact_first, last_name="Smith", email="person@example.com")]
        return ContactMatcher().find_best_match(criteria, contacts, 40)

    def test_will_matches_william(self):
        result = self._match("Will", "William")
        assert result is not None
        assert "first_name" in result.matched_fields

    def test_bill_matches_william(self):
        assert "first_name" in self._match("Bill", "William").matched_fields

    def test_rick_matches_richard(self):
        assert "first_name" in self._match("Rick", "Richard").matched_fields

    def test_liz_matches_elizabeth(self):
        assert "first_name" in self._match("Liz", "Elizabeth").matched_fields

    def test_jon_matches_john(self):
        assert "first_name" in self._match("Jon", "John").matched_fields

    def test_unrelated_first_name(self):
        assert self._match("Xavier", "William") is None

    def test_last_name_exact_only(self):
        criteria = MatchCriteria(last_name="Smyth", email="person@example.com")
        contacts = [make_contact("c1", last_name="Smith", email="person@example.com")]

        result = ContactMatcher().find_best_match(criteria, contacts, 0)

        assert result.matched_fields == ["email"]


class TestAddressAndBackfill:
    """Address scoring and fields-to-update suggestions."""

    def test_city_and_state(self):
        criteria = MatchCriteria(email="test@example.com", city="Denver", state="Colorado")
        contacts = [make_contact(
            "contact200", email="test@example.com", mailing_street="123 Main St",
            mailing_city="Denver", mailing_state="Colorado", mailing_postal_code="80202",
        )]

        result = ContactMatcher().find_best_match(criteria, contacts, 30)

        assert result is not None
        assert result.matched_fields == ["email", "city", "state"]
        assert result.confidence_score == 43
        assert result.fields_to_update is None

    def test_zip(self):
        criteria = MatchCriteria(email="test@example.com", zip="80202")
        contacts = [make_contact("contact300", email="test@example.com", mailing_postal_code="80202")]

        result = ContactMatcher().find_best_match(criteria, contacts, 37)

        assert result is not None
        assert "zip" in result.matched_fields

    def test_address_only_match_without_identifying_field(self):
        criteria = MatchCriteria(city="Denver", zip="80202")
        contacts = [make_contact("c1", mailing_city="denver", mailing_postal_code="80202")]

        result = ContactMatcher().find_best_match(criteria, contacts, 20)

        assert result is not None
        assert result.matched_fields == ["city", "zip"]
        assert result.confidence_score == 22

    def test_fields_to_update_only_empty_slots(self):
        criteria = MatchCriteria(
            email="test@example.com", city="Portland", state="OR", zip="97201", street="999 Pine St",
        )
        contacts = [make_contact(
            "contact400", first_name="Tom", last_name="Jones", email="test@example.com",
            mailing_street=None, mailing_city="Portland", mailing_state="OR", mailing_postal_code=None,
        )]

        result = ContactMatcher().find_best_match(criteria, contacts, 40)

        assert result is not None
        assert result.fields_to_update == {
            "mailing_street": "999 Pine St",
            "mailing_postal_code": "97201",
        }

    def test_fields_to_update_without_identifying_field(self):
        criteria = MatchCriteria(street="999 Pine St", zip="97201", city="Portland", state="OR")
        contacts = [make_contact("c1", mailing_city="Portland", mailing_state="OR")]

        result = ContactMatcher().find_best_match(criteria, contacts, 10)

        assert result is not None
        assert result.matched_fields == ["city", "state"]
        assert result.fields_to_update == {
            "mailing_street": "999 Pine St",
            "mailing_postal_code": "97201",
        }

    def test_no_update_for_populated_fields(self):
        criteria = MatchCriteria(
            email="test@example.com", city="Portland", state="OR", zip="97201", street="999 Pine St",
        )
        contacts = [make_contact(
            "contact500", email="test@example.com", mailing_street="123 Existing St",
            mailing_city="Portland", mailing_state="OR", mailing_postal_code="97202",
        )]

        result = ContactMatcher().find_best_match(criteria, contacts, 40)

        assert result is not None
        assert result.fields_to_update is None


def test_inputs_not_mutated():
    criteria = MatchCriteria(email="a@example.com", first_name="Will", street="1 Elm St")
    contacts = [
        make_contact("c1", email="A@example.com", first_name="William"),
        make_contact("c2", phone="555-0101"),
    ]
    criteria_before = copy.deepcopy(criteria)
    contacts_before = copy.deepcopy(contacts)

    ContactMatcher().find_best_match(criteria, contacts, 0)

    assert criteria == criteria_before
    assert contacts == contacts_before
    assert [c.id for c in contacts] == ["c1", "c2"]


def test_stats_track_decisions():
    matcher = ContactMatcher()
    contacts = [make_contact("c1", email="a@example.com")]

    matcher.find_best_match(MatchCriteria(email="a@example.com"), contacts, 0)
    matcher.find_best_match(MatchCriteria(email="a@example.com"), contacts, 70)
    matcher.find_best_match(MatchCriteria(email="b@example.com"), contacts, 0)

    assert matcher.stats.calls == 3
    assert matcher.stats.decisions == {"MATCH": 1, "BELOW_THRESHOLD": 1, "NO_CANDIDATES": 1}
    assert matcher.stats.candidates_seen == 3
    assert matcher.stats.candidates_scored == 2


def test_find_duplicates():
    contacts = [
        make_contact("c1", first_name="William", last_name="Jones", email="wj@example.com", phone="555-0101"),
        make_contact("c2", first_name="Ada", last_name="Lovelace", email="ada@example.com"),
        make_contact("c3", first_name="Bill", last_name="Jones", email="WJ@example.com", phone="(555) 0101"),
    ]

    pairs = ContactMatcher().find_duplicates(contacts, 70)

    assert len(pairs) == 1
    source, result = pairs[0]
    assert source.id == "c1"
    assert result.contact_id == "c3"
    assert result.confidence_score == 80


def test_criteria_from_contact():
    contact = make_contact("c1", email="a@example.com", mailing_postal_code="80202")

    criteria = criteria_from_contact(contact)

    assert criteria.email == "a@example.com"
    assert criteria.zip == "80202"
    assert criteria.street is None
