"""
Similarity search over the image store.

A query image is hashed with dHash and compared against every stored hash
with a vectorised Hamming distance. Results are ranked by distance, ties
going to the larger image, and composed as follows:

- every candidate within FORCED_MATCH_DISTANCE is always returned;
- the closest remaining candidates fill the list up to RESULT_LIMIT.

So the result can be longer than RESULT_LIMIT when many near-exact copies
exist. This is a linear scan; at the collection sizes this tool targets a
full pass over a numpy array is fast enough.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from .config import FORCED_MATCH_DISTANCE, RESULT_LIMIT
from .database import ImageStore
from .errors import DecodeError, HashUnavailable
from .models import ImageRecord, Match
from .scanner.dependencies import np
from .scanner.hashing import compute_dhash, hamming_distances, is_valid_hash


logger = logging.getLogger(__name__)


def _rank_key(match: Match) -> tuple[float, int]:
    return match.distance, -match.pixel_area


def compose_results(
    ranked: list[Match],
    forced_distance: float = FORCED_MATCH_DISTANCE,
    limit: int = RESULT_LIMIT,
) -> list[Match]:
    """
    Apply the forced-match inclusion policy to a ranked candidate list.

    Args:
        ranked: Candidates sorted by (distance asc, pixel area desc)
        forced_distance: Candidates at or below this are always kept
        limit: Target result size when few forced matches exist

    Returns:
        Forced matches plus max(limit - len(forced), 0) of the rest, re-sorted
    """
    forced = [m for m in ranked if m.distance <= forced_distance]
    remaining = [m for m in ranked if m.distance > forced_distance]
    extra = remaining[:max(limit - len(forced), 0)]
    return sorted(forced + extra, key=_rank_key)


class SearchEngine:
    """
    Ranks stored images by visual similarity to a query image.

    Usage:
        engine = SearchEngine(store)
        for match in engine.search_file('query.jpg'):
            print(match.path, match.distance)
    """

    def __init__(
        self,
        store: ImageStore,
        forced_distance: float = FORCED_MATCH_DISTANCE,
        limit: int = RESULT_LIMIT,
    ):
        self.store = store
        self.forced_distance = float(forced_distance)
        self.limit = int(limit)

    def hash_query(self, data: bytes) -> int:
        """
        Hash the query bytes.

        Raises:
            HashUnavailable: If the bytes cannot be decoded or hash to the
                reserved zero value
        """
        try:
            query_hash = compute_dhash(data)
        except DecodeError as e:
            raise HashUnavailable(f"Could not hash query image: {e}") from e

        if not is_valid_hash(query_hash):
            raise HashUnavailable("Query image has no usable hash (uniform image)")
        return query_hash

    def rank(self, query_hash: int, records: Optional[Iterable[ImageRecord]] = None) -> list[Match]:
        """
        Rank records against an already computed query hash.

        Args:
            query_hash: Non-zero 64-bit query hash
            records: Records to rank; defaults to a full scan of the store

        Returns:
            Ranked, composed list of Match objects (possibly empty)
        """
        if records is None:
            records = self.store.all_records()

        candidates = [r for r in records if r.has_hash]
        if not candidates:
            return []

        hashes = np.array([r.dhash for r in candidates], dtype=np.uint64)
        distances = hamming_distances(query_hash, hashes)

        # sorted() is stable, so full ties keep store order
        ranked = sorted(
            (Match.from_record(r, d) for r, d in zip(candidates, distances.tolist())),
            key=_rank_key,
        )
        return compose_results(ranked, self.forced_distance, self.limit)

    def search(self, data: bytes) -> list[Match]:
        """
        Find the stored images closest to the query image bytes.

        Raises:
            HashUnavailable: If the query cannot be hashed
        """
        query_hash = self.hash_query(data)
        matches = self.rank(query_hash)
        logger.debug(f"Query {query_hash:016x}: {len(matches)} matches")
        return matches

    def search_file(self, filepath: str | Path) -> list[Match]:
        """
        Search with an image file as the query.

        Raises:
            HashUnavailable: If the file cannot be read or hashed
        """
        try:
            data = Path(filepath).read_bytes()
        except OSError as e:
            raise HashUnavailable(f"Could not read query image {filepath}: {e}") from e
        return self.search(data)


__all__ = ['SearchEngine', 'compose_results']
