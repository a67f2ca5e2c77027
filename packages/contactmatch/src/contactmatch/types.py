"""Core types for the contactmatch contact matching system."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Literal

from contactmatch.config import FormFieldMap, QueryConfig
from contactmatch.normalize import is_blank

FieldTag = Literal[
    "email",
    "phone",
    "secondary_email",
    "first_name",
    "last_name",
    "street",
    "city",
    "state",
    "zip",
]

# CandidateContact attribute -> CRM API field name
CRM_FIELDS: dict[str, str] = {
    "id": "Id",
    "first_name": "FirstName",
    "last_name": "LastName",
    "email": "Email",
    "secondary_email": "Secondary_Email__c",
    "phone": "Phone",
    "mailing_street": "MailingStreet",
    "mailing_city": "MailingCity",
    "mailing_state": "MailingState",
    "mailing_postal_code": "MailingPostalCode",
}

# CandidateContact attribute -> camelCase key used by web clients
CAMEL_FIELDS: dict[str, str] = {
    "id": "id",
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "secondary_email": "secondaryEmail",
    "phone": "phone",
    "mailing_street": "mailingStreet",
    "mailing_city": "mailingCity",
    "mailing_state": "mailingState",
    "mailing_postal_code": "mailingPostalCode",
}

# Criteria address field -> CandidateContact mailing attribute
ADDRESS_FIELDS: dict[str, str] = {
    "street": "mailing_street",
    "city": "mailing_city",
    "state": "mailing_state",
    "zip": "mailing_postal_code",
}


def _clean(value: Any) -> str | None:
    if is_blank(value):
        return None
    return str(value).strip()


@dataclass
class MatchCriteria:
    """Identifying values of the person who submitted a form."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    secondary_email: str | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None

    @classmethod
    def from_form(
        cls,
        data: Mapping[str, Any],
        field_map: FormFieldMap | None = None,
    ) -> MatchCriteria:
        """Extract criteria from a form payload.

        For each attribute the first non-blank value among its accepted
        keys wins.
        """
        field_map = field_map or FormFieldMap()
        values: dict[str, str | None] = {}
        for f in fields(cls):
            values[f.name] = None
            for key in getattr(field_map, f.name):
                value = _clean(data.get(key))
                if value is not None:
                    values[f.name] = value
                    break
        return cls(**values)

    def has_search_fields(self) -> bool:
        """True if a search query can be built from these criteria."""
        return any(
            not is_blank(v)
            for v in (self.email, self.phone, self.secondary_email, self.city, self.state, self.zip)
        )

    def to_dict(self) -> dict[str, str | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class CandidateContact:
    """An existing CRM contact that may be the form submitter."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    secondary_email: str | None = None
    phone: str | None = None
    mailing_street: str | None = None
    mailing_city: str | None = None
    mailing_state: str | None = None
    mailing_postal_code: str | None = None
    raw: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        query_config: QueryConfig | None = None,
    ) -> CandidateContact:
        """Build a candidate from a CRM row.

        Keys are looked up by CRM API name, then camelCase, then snake_case.
        """
        query_config = query_config or QueryConfig()
        api_names = dict(CRM_FIELDS)
        api_names["secondary_email"] = query_config.secondary_email_field

        values: dict[str, Any] = {}
        for attr, api_name in api_names.items():
            value = None
            for key in (api_name, CAMEL_FIELDS[attr], attr):
                value = record.get(key)
                if value is not None:
                    break
            values[attr] = _clean(value)

        if values["id"] is None:
            raise KeyError(f"contact record has no {api_names['id']!r} value")
        return cls(**values, raw=dict(record))

    @property
    def display_name(self) -> str:
        parts = [p.strip() for p in (self.first_name, self.last_name) if not is_blank(p)]
        return " ".join(parts) or "Unknown"


@dataclass
class MatchResult:
    contact_id: str
    contact_name: str
    confidence_score: int
    matched_fields: list[str] = field(default_factory=list)
    fields_to_update: dict[str, str] | None = None
    contact: CandidateContact | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contact_id": self.contact_id,
            "contact_name": self.contact_name,
            "confidence_score": self.confidence_score,
            "matched_fields": list(self.matched_fields),
            "fields_to_update": dict(self.fields_to_update) if self.fields_to_update else None,
        }


@dataclass
class Resolution:
    """Outcome of linking a form submission to a CRM contact."""

    contact_id: str
    created: bool
    match: MatchResult | None = None
    updated_fields: dict[str, str] = field(default_factory=dict)
    reasons: list[str] = field(default_factory=list)
