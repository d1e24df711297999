"""Search query builder — Translates ``SearchParameters`` into query DSL.

Two distinct code paths:

  - Text search: a ``multi_match`` over the target fields, OR-ed with a
    match on ``entity_keywords``. An empty query becomes ``match_all``.
  - Similarity search: a candidate query selecting documents whose fuzzy
    hash has a block size comparable to the query digest's, best overlap first.
    Final scores are computed locally (see ``core.similarity``).

Every builder is a pure function returning plain dicts; the same input
always yields the same structure with field order preserved.
"""

from __future__ import annotations

from typing import Any

from docsearcher.core.similarity import comparable_block_sizes, digest_ngrams
from docsearcher.models.query import DEFAULT_SEARCH_FIELDS, SearchParameters

KEYWORDS_FIELD = "entity_keywords"
SSDEEP_FIELD = "document_ssdeep_hash"


def multi_match_query(query: str, fields: list[str] | tuple[str, ...] = DEFAULT_SEARCH_FIELDS) -> dict[str, Any]:
    """Build a ``multi_match`` clause matching *query* in any of *fields*."""
    return {
        "multi_match": {
            "query": query,
            "operator": "or",
            "fields": list(fields),
        }
    }


def text_query(params: SearchParameters) -> dict[str, Any]:
    """Build the relevance query for full-text search."""
    if not params.query.strip():
        match: dict[str, Any] = {"match_all": {}}
    else:
        match = {
            "bool": {
                "should": [
                    multi_match_query(params.query, params.fields),
                    {"match": {KEYWORDS_FIELD: {"query": params.query, "operator": "or"}}},
                ],
                "minimum_should_match": 1,
            }
        }
    return _with_filters(match, params)


def similarity_query(params: SearchParameters) -> dict[str, Any]:
    """Build the candidate query for fuzzy-hash similarity search.

    ``params.query`` must be a valid ssdeep digest. Candidates are restricted
    to digests with a comparable block size and ordered by how many of the
    query digest's 7-character substrings they contain, so the candidate window
    keeps the digests most likely to score.
    """
    prefixes = [
        {"prefix": {SSDEEP_FIELD: f"{size}:"}} for size in comparable_block_sizes(params.query)
    ]
    ngrams = [{"wildcard": {SSDEEP_FIELD: {"value": f"*{ngram}*"}}} for ngram in digest_ngrams(params.query)]
    candidates = {
        "bool": {
            "filter": [{"bool": {"should": prefixes, "minimum_should_match": 1}}],
            "should": ngrams,
        }
    }
    return _with_filters(candidates, params)


def filter_clauses(params: SearchParameters) -> list[dict[str, Any]]:
    """Build the ``bool.filter`` clauses for the optional metadata filters."""
    filters: list[dict[str, Any]] = []
    if params.document_type:
        filters.append({"term": {"document_type": params.document_type}})
    if params.document_extension:
        filters.append({"term": {"document_extension": params.document_extension}})

    size_range: dict[str, int] = {}
    if params.document_size_from is not None:
        size_range["gte"] = params.document_size_from
    if params.document_size_to is not None:
        size_range["lte"] = params.document_size_to
    if size_range:
        filters.append({"range": {"document_size": size_range}})

    date_range: dict[str, str] = {}
    if params.created_date_from is not None:
        date_range["gte"] = params.created_date_from.isoformat()
    if params.created_date_to is not None:
        date_range["lte"] = params.created_date_to.isoformat()
    if date_range:
        filters.append({"range": {"document_created": date_range}})
    return filters


def _with_filters(query: dict[str, Any], params: SearchParameters) -> dict[str, Any]:
    return {
        "bool": {
            "must": [query],
            "filter": filter_clauses(params),
        }
    }
