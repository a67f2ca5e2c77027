"""contactmatch - CRM contact matching for web-form submissions."""

from contactmatch.config import MatchConfig
from contactmatch.matcher import ContactMatcher, MatcherStats
from contactmatch.query import InvalidCriteriaError, build_search_query
from contactmatch.resolver import ContactResolver, ContactSource
from contactmatch.similarity import fuzzy_first_name_match, levenshtein_similarity
from contactmatch.types import CandidateContact, MatchCriteria, MatchResult, Resolution

__all__ = [
    "CandidateContact",
    "ContactMatcher",
    "ContactResolver",
    "ContactSource",
    "InvalidCriteriaError",
    "MatchConfig",
    "MatchCriteria",
    "MatchResult",
    "MatcherStats",
    "Resolution",
    "build_search_query",
    "fuzzy_first_name_match",
    "levenshtein_similarity",
]
