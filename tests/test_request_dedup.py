"""
Test suite for RequestDeduplicator with focus on concurrent access patterns.

Tests the deduplicator's ability to:
1. Share one in-flight request between concurrent callers
2. Clear the pending slot on success and on failure
3. Keep dedup scopes separate per entity kind
"""

import asyncio
import pytest

from ontotreelib.aio.caching import RequestDeduplicator, request_key
from ontotreelib.config import EntityKind


class SlowProducer:
    """Producer factory that counts invocations."""

    def __init__(self, result="value", delay=0.05, error=None):
        self.result = result
        self.delay = delay
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


def test_request_key_format():
    assert request_key(EntityKind.NODE, "GO:0008150") == "term-GO:0008150"
    assert request_key(EntityKind.CHILDREN, "GO:0008150") == "children-GO:0008150"
    assert request_key(EntityKind.LEAVES, "GO:0008150") == "strains-GO:0008150"


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_request():
    dedup = RequestDeduplicator()
    producer = SlowProducer()

    futures = [dedup.dedupe("term-GO:1", producer) for _ in range(5)]
    results = await asyncio.gather(*futures)

    assert producer.calls == 1
    assert results == ["value"] * 5
    assert all(f is futures[0] for f in futures)
    assert dedup.concurrent_waits == 4
    assert dedup.pending_count == 0


@pytest.mark.asyncio
async def test_registration_is_synchronous():
    """The slot is taken before the caller ever suspends."""
    dedup = RequestDeduplicator()
    future = dedup.dedupe("k", SlowProducer())

    assert dedup.in_flight("k") is future
    await future


@pytest.mark.asyncio
async def test_slot_cleared_before_waiters_resume():
    dedup = RequestDeduplicator()
    observed = []

    async def waiter():
        await dedup.dedupe("k", SlowProducer())
        observed.append(dedup.in_flight("k"))

    await asyncio.gather(waiter(), waiter())
    assert observed == [None, None]


@pytest.mark.asyncio
async def test_failure_is_shared_and_clears_slot():
    dedup = RequestDeduplicator()
    failing = SlowProducer(error=RuntimeError("boom"))

    first = dedup.dedupe("k", failing)
    second = dedup.dedupe("k", failing)
    results = await asyncio.gather(first, second, return_exceptions=True)

    assert failing.calls == 1
    assert all(isinstance(r, RuntimeError) for r in results)
    assert dedup.in_flight("k") is None

    # Next call is a fresh attempt, not wedged on the failure
    retry = SlowProducer(result="recovered")
    assert await dedup.dedupe("k", retry) == "recovered"
    assert retry.calls == 1


@pytest.mark.asyncio
async def test_settled_request_is_not_reused():
    dedup = RequestDeduplicator()
    producer = SlowProducer(delay=0)

    await dedup.dedupe("k", producer)
    await dedup.dedupe("k", producer)

    assert producer.calls == 2
    assert dedup.started == 2


@pytest.mark.asyncio
async def test_keys_of_different_kinds_do_not_share():
    dedup = RequestDeduplicator()
    producer = SlowProducer()

    node_future = dedup.dedupe(request_key(EntityKind.NODE, "GO:1"), producer)
    children_future = dedup.dedupe(request_key(EntityKind.CHILDREN, "GO:1"), producer)

    assert node_future is not children_future
    await asyncio.gather(node_future, children_future)
    assert producer.calls == 2


@pytest.mark.asyncio
async def test_cancelled_before_start_clears_slot():
    dedup = RequestDeduplicator()
    future = dedup.dedupe("k", SlowProducer())
    future.cancel()

    with pytest.raises(asyncio.CancelledError):
        await future
    assert dedup.in_flight("k") is None
