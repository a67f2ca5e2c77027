"""Deterministic scoring of a candidate contact against match criteria."""

from __future__ import annotations

from contactmatch.config import FieldWeights, MatchConfig
from contactmatch.normalize import is_blank, phone_digits, values_match
from contactmatch.similarity import fuzzy_first_name_match
from contactmatch.types import ADDRESS_FIELDS, CandidateContact, MatchCriteria


def matched_fields(
    criteria: MatchCriteria,
    contact: CandidateContact,
    config: MatchConfig | None = None,
) -> list[str]:
    """Return the field tags on which the contact matches, in evaluation order."""
    if config is None:
        config = MatchConfig()
    matched: list[str] = []

    # 1. Email matches either the primary or the secondary address
    if not is_blank(criteria.email):
        if values_match(criteria.email, contact.email) or values_match(
            criteria.email, contact.secondary_email
        ):
            matched.append("email")

    # 2. Phone, punctuation-insensitive
    if not is_blank(criteria.phone) and not is_blank(contact.phone):
        digits = phone_digits(criteria.phone)
        if digits and digits == phone_digits(contact.phone):
            matched.append("phone")

    # 3. Explicit secondary email
    if not is_blank(criteria.secondary_email) and values_match(
        criteria.secondary_email, contact.secondary_email
    ):
        matched.append("secondary_email")

    # 4-5. Names count only once an identifying field matched
    if matched and not is_blank(criteria.first_name):
        if fuzzy_first_name_match(
            criteria.first_name,
            contact.first_name,
            config.thresholds.first_name_similarity,
        ):
            matched.append("first_name")

    if matched and not is_blank(criteria.last_name):
        if values_match(criteria.last_name, contact.last_name):
            matched.append("last_name")

    # 6. Address fragments, no precondition
    for tag, attr in ADDRESS_FIELDS.items():
        value = getattr(criteria, tag)
        if not is_blank(value) and values_match(value, getattr(contact, attr)):
            matched.append(tag)

    return matched


def confidence_score(
    tags: list[str],
    weights: FieldWeights | None = None,
    max_score: int = 100,
) -> int:
    """Sum field weights (each tag counted once) and cap at max_score."""
    if weights is None:
        weights = FieldWeights()
    total = sum(weights.weight_for(tag) for tag in dict.fromkeys(tags))
    return min(total, max_score)


def fields_to_update(
    criteria: MatchCriteria,
    contact: CandidateContact,
) -> dict[str, str] | None:
    """Empty mailing-address fields on the contact that the criteria can fill."""
    updates: dict[str, str] = {}
    for tag, attr in ADDRESS_FIELDS.items():
        value = getattr(criteria, tag)
        if is_blank(getattr(contact, attr)) and not is_blank(value):
            updates[attr] = str(value)
    return updates or None
