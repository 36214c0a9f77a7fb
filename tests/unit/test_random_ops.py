"""Unit tests for seeded generation and shrinking of op sequences."""

import random

import pytest

from partialio import (
    ErrorKind,
    Failure,
    GenError,
    GenInterrupted,
    GenInterruptedWouldBlock,
    GenNoErrors,
    GenWouldBlock,
    Limited,
    PartialWithErrors,
    minimize,
)


class TestGenerate:
    def test_same_seed_same_sequence(self):
        """Generation is reproducible from the seed."""
        first = PartialWithErrors.generate(random.Random(7), GenInterrupted())
        second = PartialWithErrors.generate(random.Random(7), GenInterrupted())
        assert first == second

    def test_size_and_limit_bounds(self):
        """Length stays within size and limits within 1..limit_bytes."""
        rng = random.Random(1)
        for _ in range(50):
            ops = PartialWithErrors.generate(rng, GenNoErrors(), size=10, limit_bytes=4)
            assert len(ops) <= 10
            assert all(isinstance(op, Limited) and 1 <= op.limit <= 4 for op in ops)

    def test_limit_defaults_to_size(self):
        """Without limit_bytes, limits are bounded by size."""
        rng = random.Random(3)
        for _ in range(20):
            ops = PartialWithErrors.generate(rng, GenNoErrors(), size=5)
            assert all(op.limit <= 5 for op in ops)

    def test_zero_size_still_generates_valid_limits(self):
        """size=0 yields an empty sequence rather than an invalid limit."""
        assert PartialWithErrors.generate(random.Random(0), GenNoErrors(), size=0) == []

    @pytest.mark.parametrize("limit_bytes", [0, -3])
    def test_rejects_non_positive_limit_bytes(self, limit_bytes):
        """limit_bytes must be at least one; zero is not replaced by size."""
        with pytest.raises(ValueError, match="limit_bytes"):
            PartialWithErrors.generate(random.Random(0), GenNoErrors(), size=10, limit_bytes=limit_bytes)

    def test_rejects_negative_size(self):
        """A negative size is an error."""
        with pytest.raises(ValueError, match="size"):
            PartialWithErrors.generate(random.Random(0), GenNoErrors(), size=-1)

    @pytest.mark.parametrize(
        "gen_error,allowed",
        [
            (GenInterrupted(), {ErrorKind.INTERRUPTED}),
            (GenWouldBlock(), {ErrorKind.WOULD_BLOCK}),
            (GenInterruptedWouldBlock(), {ErrorKind.INTERRUPTED, ErrorKind.WOULD_BLOCK}),
        ],
    )
    def test_error_kinds(self, gen_error, allowed):
        """Each generator only injects its own error kinds."""
        rng = random.Random(11)
        kinds = set()
        for _ in range(20):
            ops = PartialWithErrors.generate(rng, gen_error, size=50)
            kinds |= {op.kind for op in ops if isinstance(op, Failure)}
        assert kinds == allowed

    def test_custom_gen_error(self):
        """Any object with gen_error satisfies the GenError protocol."""
        class AlwaysReset:
            def gen_error(self, rng):
                return ErrorKind.CONNECTION_RESET

        assert isinstance(AlwaysReset(), GenError)
        ops = PartialWithErrors.generate(random.Random(0), AlwaysReset(), size=10)
        assert all(op == Failure(ErrorKind.CONNECTION_RESET) for op in ops)


class TestSequence:
    def test_behaves_like_a_sequence(self):
        """Indexing, slicing and iteration work like a list."""
        ops = PartialWithErrors([Limited(1), Failure(ErrorKind.INTERRUPTED), Limited(3)])
        assert len(ops) == 3
        assert ops[1] == Failure(ErrorKind.INTERRUPTED)
        assert ops[:2] == [Limited(1), Failure(ErrorKind.INTERRUPTED)]
        assert isinstance(ops[:2], PartialWithErrors)
        assert list(ops) == [Limited(1), Failure(ErrorKind.INTERRUPTED), Limited(3)]

    def test_hashable(self):
        """Equal sequences hash equal."""
        ops = PartialWithErrors([Limited(2)])
        assert len({ops, PartialWithErrors([Limited(2)])}) == 1

    def test_repr(self):
        ops = PartialWithErrors([Limited(2), Failure(ErrorKind.WOULD_BLOCK)])
        assert repr(ops) == "PartialWithErrors([Limited(2), Failure(WOULD_BLOCK)])"


class TestShrink:
    def test_empty_has_no_candidates(self):
        """An empty sequence cannot shrink."""
        assert list(PartialWithErrors().shrink()) == []

    def test_candidate_order(self):
        """Empty first, then halves, then single removals, then halved limits."""
        ops = PartialWithErrors([Limited(4), Failure(ErrorKind.INTERRUPTED)])
        candidates = list(ops.shrink())
        assert candidates == [
            [],
            [Limited(4)],
            [Failure(ErrorKind.INTERRUPTED)],
            [Limited(2), Failure(ErrorKind.INTERRUPTED)],
        ]

    def test_limited_one_not_halved(self):
        """Limited(1) has no smaller limit to offer."""
        assert list(PartialWithErrors([Limited(1)]).shrink()) == [[]]

    @pytest.mark.parametrize(
        "ops",
        [
            [Limited(1), Limited(1)],
            [Limited(2), Limited(2), Limited(2)],
            [Failure(ErrorKind.INTERRUPTED), Limited(8), Failure(ErrorKind.INTERRUPTED), Limited(8)],
        ],
    )
    def test_candidates_are_distinct(self, ops):
        """No candidate is offered twice and none equals the input."""
        candidates = list(PartialWithErrors(ops).shrink())
        assert len(set(candidates)) == len(candidates)
        assert PartialWithErrors(ops) not in candidates


class TestMinimize:
    def test_finds_single_failure(self):
        """A failure buried among limits shrinks to the failure alone."""
        def fails(ops):
            return any(isinstance(op, Failure) for op in ops)

        ops = [Limited(3), Limited(7), Failure(ErrorKind.INTERRUPTED), Limited(9)]
        assert minimize(ops, fails) == [Failure(ErrorKind.INTERRUPTED)]

    def test_shrinks_limits(self):
        """Limits are halved while the predicate still fails."""
        def fails(ops):
            return sum(op.limit for op in ops if isinstance(op, Limited)) >= 3

        result = minimize([Limited(100), Limited(50)], fails)
        assert len(result) == 1
        assert 3 <= result[0].limit < 6

    def test_requires_failing_input(self):
        """Minimizing a passing sequence is an error."""
        with pytest.raises(ValueError, match="failing sequence"):
            minimize([Limited(1)], lambda ops: False)

    def test_max_steps_bounds_work(self):
        """max_steps caps the number of predicate calls."""
        calls = []

        def fails(ops):
            calls.append(ops)
            return True

        minimize([Limited(8)] * 10, fails, max_steps=3)
        # the initial check plus at most three candidates
        assert len(calls) <= 4
