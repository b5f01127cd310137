"""
Ordered fallback chains.

Twitter extraction, speech synthesis and summarization each try a list of
strategies in order and keep the first acceptable result. A strategy fails
by raising or by returning a result its ``accept`` check rejects; every
failure reason is kept for diagnostics.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


def _always(_result) -> bool:
    return True


@dataclass
class Strategy(Generic[T]):
    """One attempt in a fallback chain."""

    name: str
    attempt: Callable[[], Awaitable[T]]
    accept: Callable[[T], bool] = _always


@dataclass
class StrategyFailure:
    name: str
    error: str
    exception: BaseException | None = None


@dataclass
class ChainResult(Generic[T]):
    """The accepted value, which strategy produced it, and what failed before."""

    value: T
    strategy: str
    failures: list[StrategyFailure] = field(default_factory=list)


class FallbackExhausted(Exception):
    """Raised when no strategy in a chain produced an acceptable result."""

    def __init__(self, failures: list[StrategyFailure]):
        self.failures = failures
        reasons = "; ".join(f"{f.name}: {f.error}" for f in failures) or "no strategies"
        super().__init__(f"All strategies failed ({reasons})")


async def run_chain(strategies: Sequence[Strategy[T]], chain: str = "fallback") -> ChainResult[T]:
    """Try each strategy in order, stopping at the first acceptable result."""
    failures: list[StrategyFailure] = []

    for strategy in strategies:
        try:
            value = await strategy.attempt()
        except Exception as e:
            logger.warning(f"{chain}: {strategy.name} failed: {e}")
            failures.append(StrategyFailure(strategy.name, str(e) or type(e).__name__, e))
            continue

        if not strategy.accept(value):
            logger.warning(f"{chain}: {strategy.name} returned an unusable result")
            failures.append(StrategyFailure(strategy.name, "result rejected"))
            continue

        logger.info(f"{chain}: {strategy.name} succeeded")
        return ChainResult(value=value, strategy=strategy.name, failures=failures)

    raise FallbackExhausted(failures)
