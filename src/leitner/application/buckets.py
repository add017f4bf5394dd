"""Conversions between the sparse and dense bucket representations."""

from leitner.domain.errors import InvalidStateError
from leitner.domain.models import BucketArray, BucketMap, BucketRange


def to_bucket_array(buckets: BucketMap) -> BucketArray:
    """
    Build the dense view of a bucket map.

    Index i of the result holds the cards of bucket i, for every i from 0 up to
    the highest bucket number in the map. Missing buckets become empty sets.
    The sets are copies, so the view can be handed out without exposing the map.

    Raises:
        InvalidStateError: If the map has no buckets or a negative bucket number.
    """
    if not buckets:
        raise InvalidStateError("Cannot build bucket array from an empty bucket map")

    negative = [b for b in buckets if b < 0]
    if negative:
        raise InvalidStateError(f"Negative bucket numbers are not allowed: {sorted(negative)}")

    max_bucket = max(buckets)
    return [set(buckets.get(i, ())) for i in range(max_bucket + 1)]


def bucket_range(bucket_array: BucketArray) -> BucketRange | None:
    """
    Find the lowest and highest buckets that hold cards.

    Returns None when every bucket is empty.
    """
    populated = [i for i, cards in enumerate(bucket_array) if cards]
    if not populated:
        return None
    return BucketRange(min_bucket=populated[0], max_bucket=populated[-1])
