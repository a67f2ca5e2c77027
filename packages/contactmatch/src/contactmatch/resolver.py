"""Link a form submission to an existing CRM contact or create a new one."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import structlog

from contactmatch.config import MatchConfig
from contactmatch.matcher import ContactMatcher
from contactmatch.normalize import is_blank, mask_value
from contactmatch.query import build_search_query
from contactmatch.types import CRM_FIELDS, CandidateContact, MatchCriteria, Resolution

log = structlog.get_logger()

# Criteria attribute -> CandidateContact attribute, for new-contact payloads
_CRITERIA_TO_CONTACT: dict[str, str] = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "secondary_email": "secondary_email",
    "phone": "phone",
    "street": "mailing_street",
    "city": "mailing_city",
    "state": "mailing_state",
    "zip": "mailing_postal_code",
}


class ContactSource(Protocol):
    """Protocol for the CRM contact store."""

    def query(self, soql: str) -> list[Mapping[str, Any]]: ...

    def create(self, fields: dict[str, Any]) -> str: ...

    def update(self, contact_id: str, fields: dict[str, Any]) -> None: ...


class ContactResolver:
    """Search, match, then back-fill or create."""

    def __init__(
        self,
        source: ContactSource,
        matcher: ContactMatcher | None = None,
        config: MatchConfig | None = None,
    ) -> None:
        self.config = config or (matcher.config if matcher else MatchConfig())
        self.matcher = matcher or ContactMatcher(self.config)
        self.source = source

    def _api_name(self, attr: str) -> str:
        if attr == "secondary_email":
            return self.config.query.secondary_email_field
        return CRM_FIELDS[attr]

    def fetch_candidates(self, criteria: MatchCriteria) -> list[CandidateContact]:
        """Run the search query and convert rows. Raises InvalidCriteriaError.

        Rows without a contact id are logged and skipped.
        """
        soql = build_search_query(criteria, self.config.query)
        rows = self.source.query(soql)
        log.debug("contact_search_done", row_count=len(rows))
        candidates: list[CandidateContact] = []
        for i, row in enumerate(rows):
            try:
                candidates.append(CandidateContact.from_record(row, self.config.query))
            except KeyError as e:
                log.warning("contact_row_skipped", row=i, reason=str(e))
        return candidates

    def new_contact_fields(
        self,
        criteria: MatchCriteria,
        extra: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """CRM field payload for a new contact built from the criteria."""
        payload: dict[str, Any] = {}
        for crit_attr, contact_attr in _CRITERIA_TO_CONTACT.items():
            value = getattr(criteria, crit_attr)
            if not is_blank(value):
                payload[self._api_name(contact_attr)] = value
        if extra:
            payload.update(extra)
        return payload

    def resolve(
        self,
        criteria: MatchCriteria,
        new_contact_fields: Mapping[str, Any] | None = None,
        min_confidence: int | None = None,
    ) -> Resolution:
        """Return the contact the submission belongs to, creating one if needed."""
        reasons: list[str] = []
        candidates: list[CandidateContact] = []

        if criteria.has_search_fields():
            candidates = self.fetch_candidates(criteria)
        else:
            log.info("contact_search_skipped", reason="no searchable criteria")
            reasons.append("no_search_criteria")

        match = None
        if candidates:
            match = self.matcher.find_best_match(criteria, candidates, min_confidence)
        elif not reasons:
            reasons.append("no_candidates")

        if match is not None:
            updated: dict[str, str] = {}
            if match.fields_to_update:
                updated = {self._api_name(k): v for k, v in match.fields_to_update.items()}
                self.source.update(match.contact_id, updated)
                log.info(
                    "contact_backfilled",
                    contact_id=match.contact_id,
                    fields=sorted(updated),
                )
            log.info(
                "contact_linked",
                contact_id=match.contact_id,
                confidence=match.confidence_score,
                matched_fields=match.matched_fields,
            )
            return Resolution(
                contact_id=match.contact_id,
                created=False,
                match=match,
                updated_fields=updated,
                reasons=reasons + ["matched"],
            )

        if candidates:
            reasons.append("below_threshold")

        payload = self.new_contact_fields(criteria, new_contact_fields)
        contact_id = self.source.create(payload)
        log.info(
            "contact_created",
            contact_id=contact_id,
            email=mask_value(criteria.email),
            candidate_count=len(candidates),
        )
        return Resolution(contact_id=contact_id, created=True, reasons=reasons)
