"""Configuration for the contactmatch contact matching system."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FieldWeights:
    email: int = 25
    phone: int = 25
    secondary_email: int = 20
    first_name: int = 15
    last_name: int = 15
    zip: int = 12
    city: int = 10
    state: int = 8
    street: int = 8

    def weight_for(self, tag: str) -> int:
        return getattr(self, tag, 0)


@dataclass
class Thresholds:
    min_confidence: int = 70  # link-or-create threshold
    first_name_similarity: float = 0.8
    max_score: int = 100


@dataclass
class QueryConfig:
    object_name: str = "Contact"
    secondary_email_field: str = "Secondary_Email__c"
    select_fields: list[str] = field(default_factory=lambda: [
        "Id",
        "FirstName",
        "LastName",
        "Email",
        "Phone",
        "MailingStreet",
        "MailingCity",
        "MailingState",
        "MailingPostalCode",
    ])


@dataclass
class FormFieldMap:
    """Form payload keys accepted for each criteria attribute, in priority order."""

    first_name: list[str] = field(default_factory=lambda: ["firstName", "first_name", "FirstName__c", "FirstName"])
    last_name: list[str] = field(default_factory=lambda: ["lastName", "last_name", "LastName__c", "LastName"])
    email: list[str] = field(default_factory=lambda: ["email", "Email__c", "Email"])
    secondary_email: list[str] = field(default_factory=lambda: [
        "secondaryEmail", "secondary_email", "Secondary_Email__c",
    ])
    phone: list[str] = field(default_factory=lambda: ["phone", "Phone__c", "Phone"])
    street: list[str] = field(default_factory=lambda: ["street", "Street__c", "MailingStreet"])
    city: list[str] = field(default_factory=lambda: ["city", "City__c", "MailingCity"])
    state: list[str] = field(default_factory=lambda: ["state", "State__c", "MailingState"])
    zip: list[str] = field(default_factory=lambda: ["zip", "postalCode", "Zip__c", "MailingPostalCode"])


@dataclass
class MatchConfig:
    weights: FieldWeights = field(default_factory=FieldWeights)
    thresholds: Thresholds = field(default_factory=Thresholds)
    query: QueryConfig = field(default_factory=QueryConfig)
    form_fields: FormFieldMap = field(default_factory=FormFieldMap)
