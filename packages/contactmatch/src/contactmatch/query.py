"""SOQL search query for fetching candidate contacts."""

from __future__ import annotations

from typing import Any

from contactmatch.config import QueryConfig
from contactmatch.normalize import is_blank
from contactmatch.types import MatchCriteria


class InvalidCriteriaError(ValueError):
    """Raised when criteria hold nothing the search query can use."""


def escape_soql(value: Any) -> str:
    """Escape a value for use inside a single-quoted SOQL string literal."""
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def build_where_clause(criteria: MatchCriteria, config: QueryConfig | None = None) -> str:
    """OR together one condition per present criterion.

    The query fetches a superset of what scoring can match. The first/last
    name pair is only added when an identifying field (email, phone,
    secondary email) is also searched.
    """
    config = config or QueryConfig()
    secondary = config.secondary_email_field
    conditions: list[str] = []

    if not is_blank(criteria.email):
        email = escape_soql(criteria.email)
        conditions.append(f"(Email = '{email}' OR {secondary} = '{email}')")

    if not is_blank(criteria.phone):
        conditions.append(f"Phone = '{escape_soql(criteria.phone)}'")

    if not is_blank(criteria.secondary_email):
        conditions.append(f"{secondary} = '{escape_soql(criteria.secondary_email)}'")

    has_identifying = bool(conditions)

    if not is_blank(criteria.city):
        conditions.append(f"MailingCity = '{escape_soql(criteria.city)}'")

    if not is_blank(criteria.state):
        conditions.append(f"MailingState = '{escape_soql(criteria.state)}'")

    if not is_blank(criteria.zip):
        conditions.append(f"MailingPostalCode = '{escape_soql(criteria.zip)}'")

    if has_identifying and not is_blank(criteria.first_name) and not is_blank(criteria.last_name):
        first = escape_soql(criteria.first_name)
        last = escape_soql(criteria.last_name)
        conditions.append(f"(FirstName = '{first}' AND LastName = '{last}')")

    if not conditions:
        raise InvalidCriteriaError("At least one contact matching criterion must be provided")

    return " OR ".join(conditions)


def build_search_query(criteria: MatchCriteria, config: QueryConfig | None = None) -> str:
    """Build the full SOQL SELECT statement for candidate contacts."""
    config = config or QueryConfig()
    where = build_where_clause(criteria, config)
    fields = list(config.select_fields)
    # The secondary email column follows Phone unless already listed
    if config.secondary_email_field not in fields:
        pos = fields.index("Phone") + 1 if "Phone" in fields else len(fields)
        fields.insert(pos, config.secondary_email_field)
    select = ", ".join(fields)
    return f"SELECT {select} FROM {config.object_name} WHERE {where}"
