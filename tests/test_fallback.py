"""Tests for the ordered fallback chain driver."""

import pytest

from readitout.fallback import FallbackExhausted, Strategy, run_chain


def recorder(calls: list, name: str, value=None, error: Exception | None = None):
    async def attempt():
        calls.append(name)
        if error is not None:
            raise error
        return value

    return attempt


@pytest.mark.asyncio
async def test_first_acceptable_result_wins():
    calls = []
    result = await run_chain([
        Strategy("primary", recorder(calls, "primary", error=RuntimeError("down"))),
        Strategy("secondary", recorder(calls, "secondary", value="ok")),
        Strategy("tertiary", recorder(calls, "tertiary", value="unused")),
    ])

    assert result.value == "ok"
    assert result.strategy == "secondary"
    assert calls == ["primary", "secondary"]
    assert [f.name for f in result.failures] == ["primary"]
    assert result.failures[0].error == "down"


@pytest.mark.asyncio
async def test_rejected_result_counts_as_failure():
    calls = []
    result = await run_chain([
        Strategy("short", recorder(calls, "short", value="abc"), accept=lambda v: len(v) > 5),
        Strategy("long", recorder(calls, "long", value="abcdefgh"), accept=lambda v: len(v) > 5),
    ])

    assert result.value == "abcdefgh"
    assert result.failures[0].error == "result rejected"


@pytest.mark.asyncio
async def test_exhausted_chain_reports_every_failure():
    calls = []
    with pytest.raises(FallbackExhausted) as exc_info:
        await run_chain([
            Strategy("a", recorder(calls, "a", error=ValueError("bad a"))),
            Strategy("b", recorder(calls, "b", error=ValueError())),
        ])

    failures = exc_info.value.failures
    assert [f.name for f in failures] == ["a", "b"]
    # Empty messages fall back to the exception type
    assert failures[1].error == "ValueError"
    assert "a: bad a" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_chain_is_exhausted():
    with pytest.raises(FallbackExhausted):
        await run_chain([])
