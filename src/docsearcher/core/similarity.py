"""Fuzzy-hash similarity ranking.

Documents carry an ssdeep digest (``blocksize:hash1:hash2``). Two digests
are compared with the ssdeep edit-distance score (0-100) via ``ppdeep``;
digests whose block sizes differ by more than a factor of two always
score 0.
"""

from __future__ import annotations

import logging
import re

import ppdeep

from docsearcher.models.document import Document

logger = logging.getLogger(__name__)

_SSDEEP_PATTERN = re.compile(r"^[1-9][0-9]*:[0-9A-Za-z+/]+:[0-9A-Za-z+/]*$")

# ssdeep scores 0 unless the compared hashes share a substring this long
COMMON_SUBSTRING_LENGTH = 7


def is_valid_digest(digest: str) -> bool:
    """Return True if *digest* looks like an ssdeep digest."""
    return bool(_SSDEEP_PATTERN.match(digest.strip()))


def comparable_block_sizes(digest: str) -> list[int]:
    """Block sizes of digests that can score above 0 against *digest*.

    ssdeep only compares digests with an equal block size or one twice
    or half as large. *digest* must be valid.
    """
    block_size = int(digest.strip().split(":", 1)[0])
    sizes = [block_size, block_size * 2]
    if block_size % 2 == 0:
        sizes.append(block_size // 2)
    return sizes


def digest_ngrams(digest: str, size: int = COMMON_SUBSTRING_LENGTH) -> list[str]:
    """Distinct substrings of length *size* from both hash parts of *digest*."""
    ngrams: list[str] = []
    for part in digest.strip().split(":")[1:]:
        for start in range(len(part) - size + 1):
            ngram = part[start : start + size]
            if ngram not in ngrams:
                ngrams.append(ngram)
    return ngrams


def similarity_score(query: str, digest: str) -> int:
    """Compare two ssdeep digests; malformed digests score 0."""
    if not is_valid_digest(digest):
        return 0
    return int(ppdeep.compare(query.strip(), digest.strip()))


def rank_by_similarity(
    query: str,
    documents: list[Document],
    min_score: int = 1,
) -> list[tuple[Document, int]]:
    """Score *documents* against *query* and order them by similarity.

    Documents scoring below *min_score* are dropped. Ties are broken by
    ``document_md5_hash`` so the order is stable across calls.

    Args:
        query: ssdeep digest to compare against. Must be valid.
        documents: Candidate documents.
        min_score: Minimum score (0-100) to keep a document.

    Returns:
        ``(document, score)`` pairs, best match first.
    """
    scored: list[tuple[Document, int]] = []
    for doc in documents:
        score = similarity_score(query, doc.document_ssdeep_hash)
        if score < min_score:
            continue
        scored.append((doc, score))

    scored.sort(key=lambda pair: (-pair[1], pair[0].document_md5_hash))
    logger.debug("Ranked %d of %d candidates by ssdeep similarity", len(scored), len(documents))
    return scored
