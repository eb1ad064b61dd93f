"""Founding Token Pool — tests for single-use tokens and the global cap.

Tests cover:
    - a valid token redeems once, then is rejected
    - invalid input (empty, None, unknown) mutates nothing
    - whitespace around a token is ignored
    - record_grant stops at the cap; redemption is refused once the cap is full
    - concurrent redemptions of one token succeed exactly once
"""

import threading

from pairgate.services.token_pool import FoundingTokenPool


def test_token_redeems_once():
    pool = FoundingTokenPool(["fc_a", "fc_b"], cap=30)
    assert pool.redeem("fc_a")
    assert not pool.redeem("fc_a")
    assert pool.remaining_tokens == 1


def test_invalid_input_changes_nothing():
    pool = FoundingTokenPool(["fc_a"], cap=30)
    for bad in ("", None, "   ", "fc_unknown"):
        assert not pool.redeem(bad)
    assert pool.remaining_tokens == 1
    assert pool.granted == 0


def test_token_is_stripped():
    pool = FoundingTokenPool(["fc_a"], cap=30)
    assert pool.redeem("  fc_a  ")


def test_record_grant_bounded_by_cap():
    pool = FoundingTokenPool([], cap=2)
    assert pool.record_grant()
    assert pool.record_grant()
    assert not pool.record_grant()
    assert pool.granted == 2


def test_redeem_refused_once_cap_full():
    pool = FoundingTokenPool(["fc_a"], cap=1)
    pool.record_grant()
    assert not pool.redeem("fc_a")
    assert pool.remaining_tokens == 1


def test_concurrent_redemption_single_winner():
    pool = FoundingTokenPool(["fc_a"], cap=30)
    results = []
    barrier = threading.Barrier(8)

    def redeem():
        barrier.wait()
        results.append(pool.redeem("fc_a"))

    threads = [threading.Thread(target=redeem) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 1
