"""Contact matching: score candidates, pick the best, suggest back-fills."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from contactmatch.config import MatchConfig
from contactmatch.normalize import mask_value
from contactmatch.scoring import confidence_score, fields_to_update, matched_fields
from contactmatch.types import CandidateContact, MatchCriteria, MatchResult

log = structlog.get_logger()


@dataclass
class MatcherStats:
    """Statistics collected across find_best_match calls."""

    calls: int = 0
    candidates_seen: int = 0
    candidates_scored: int = 0
    decisions: dict[str, int] = field(default_factory=lambda: {
        "MATCH": 0, "BELOW_THRESHOLD": 0, "NO_CANDIDATES": 0,
    })


@dataclass
class _Scored:
    contact: CandidateContact
    score: int
    matched: list[str]


class ContactMatcher:
    """Weighted-field contact matcher with fuzzy first names."""

    def __init__(self, config: MatchConfig | None = None) -> None:
        self.config = config or MatchConfig()
        self.stats = MatcherStats()

    def score(self, criteria: MatchCriteria, contact: CandidateContact) -> tuple[int, list[str]]:
        """Score a single candidate. Returns (confidence, matched field tags)."""
        tags = matched_fields(criteria, contact, self.config)
        score = confidence_score(tags, self.config.weights, self.config.thresholds.max_score)
        return score, tags

    def find_best_match(
        self,
        criteria: MatchCriteria,
        candidates: Sequence[CandidateContact] | None,
        min_confidence: int | None = None,
    ) -> MatchResult | None:
        """Return the highest-scoring candidate at or above min_confidence.

        Candidates without any matched field are never returned, even with a
        threshold of 0. Ties keep the input order.
        """
        if min_confidence is None:
            min_confidence = self.config.thresholds.min_confidence
        self.stats.calls += 1

        if not candidates:
            self.stats.decisions["NO_CANDIDATES"] += 1
            log.debug("find_best_match_no_candidates")
            return None

        self.stats.candidates_seen += len(candidates)

        scored: list[_Scored] = []
        for contact in candidates:
            score, tags = self.score(criteria, contact)
            if tags:
                scored.append(_Scored(contact=contact, score=score, matched=tags))
        self.stats.candidates_scored += len(scored)

        if not scored:
            self.stats.decisions["NO_CANDIDATES"] += 1
            log.debug(
                "find_best_match_no_matched_fields",
                candidate_count=len(candidates),
                email=mask_value(criteria.email),
            )
            return None

        # list.sort is stable: equal scores keep candidate order
        scored.sort(key=lambda s: s.score, reverse=True)
        best = scored[0]

        log.debug(
            "scoring_done",
            best_contact_id=best.contact.id,
            best_score=best.score,
            runner_up_score=scored[1].score if len(scored) > 1 else None,
            matched_fields=best.matched,
            min_confidence=min_confidence,
        )

        if best.score < min_confidence:
            self.stats.decisions["BELOW_THRESHOLD"] += 1
            return None

        self.stats.decisions["MATCH"] += 1
        result = MatchResult(
            contact_id=best.contact.id,
            contact_name=best.contact.display_name,
            confidence_score=best.score,
            matched_fields=list(best.matched),
            fields_to_update=fields_to_update(criteria, best.contact),
            contact=best.contact,
        )
        log.debug(
            "find_best_match_done",
            contact_id=result.contact_id,
            confidence=result.confidence_score,
            fields_to_update=sorted(result.fields_to_update or {}),
        )
        return result

    def find_duplicates(
        self,
        contacts: Sequence[CandidateContact],
        min_confidence: int | None = None,
    ) -> list[tuple[CandidateContact, MatchResult]]:
        """Find probable duplicates within one contact list.

        Each contact is matched, as criteria, against the contacts after it.
        """
        pairs: list[tuple[CandidateContact, MatchResult]] = []
        for i, contact in enumerate(contacts):
            criteria = criteria_from_contact(contact)
            result = self.find_best_match(criteria, contacts[i + 1:], min_confidence)
            if result is not None:
                pairs.append((contact, result))
        log.info("find_duplicates_done", contacts=len(contacts), pairs=len(pairs))
        return pairs


def criteria_from_contact(contact: CandidateContact) -> MatchCriteria:
    """Use an existing contact's values as match criteria."""
    return MatchCriteria(
        first_name=contact.first_name,
        last_name=contact.last_name,
        email=contact.email,
        secondary_email=contact.secondary_email,
        phone=contact.phone,
        street=contact.mailing_street,
        city=contact.mailing_city,
        state=contact.mailing_state,
        zip=contact.mailing_postal_code,
    )
