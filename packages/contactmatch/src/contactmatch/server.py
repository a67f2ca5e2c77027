"""FastAPI server exposing contact matching to the form backend."""

import uuid
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from contactmatch.config import MatchConfig
from contactmatch.matcher import ContactMatcher
from contactmatch.query import InvalidCriteriaError, build_search_query
from contactmatch.types import CandidateContact, MatchCriteria, MatchResult

log = structlog.get_logger()


class CriteriaModel(BaseModel):
    """Match criteria; accepts camelCase or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    secondary_email: str | None = Field(default=None, alias="secondaryEmail")
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None

    def to_criteria(self) -> MatchCriteria:
        return MatchCriteria(**self.model_dump(by_alias=False))


class MatchRequest(BaseModel):
    """Request body for matching criteria against candidate records."""

    model_config = ConfigDict(populate_by_name=True)

    criteria: CriteriaModel
    candidates: list[dict[str, Any]] = []  # CRM rows (API names) or snake_case dicts
    min_confidence: int | None = Field(default=None, alias="minConfidence", ge=0, le=100)


class MatchResponseModel(BaseModel):
    contact_id: str
    contact_name: str
    confidence_score: int
    matched_fields: list[str]
    fields_to_update: dict[str, str] | None = None


class MatchResponse(BaseModel):
    match: MatchResponseModel | None


class QueryResponse(BaseModel):
    query: str


def _to_response(result: MatchResult | None) -> MatchResponse:
    if result is None:
        return MatchResponse(match=None)
    return MatchResponse(match=MatchResponseModel(**result.to_dict()))


def create_app(config: MatchConfig | None = None) -> FastAPI:
    """Create the FastAPI application."""
    config = config or MatchConfig()
    app = FastAPI(title="Contact Match API")

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/contacts/match")
    async def match_contact(req: MatchRequest) -> MatchResponse:
        """Pick the best candidate for the criteria, or null."""
        criteria = req.criteria.to_criteria()
        try:
            candidates = [CandidateContact.from_record(r, config.query) for r in req.candidates]
        except KeyError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        # Per-request matcher keeps stats isolated between requests
        matcher = ContactMatcher(config)
        result = matcher.find_best_match(criteria, candidates, req.min_confidence)
        log.info(
            "match_request_done",
            candidate_count=len(candidates),
            matched=result is not None,
            confidence=result.confidence_score if result else None,
        )
        return _to_response(result)

    @app.post("/api/contacts/search-query")
    async def search_query(criteria: CriteriaModel) -> QueryResponse:
        """Build the SOQL statement that fetches candidates for the criteria."""
        try:
            query = build_search_query(criteria.to_criteria(), config.query)
        except InvalidCriteriaError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return QueryResponse(query=query)

    return app
