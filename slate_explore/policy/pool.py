
import logging
import queue
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Protocol, Sequence

from slate_explore.decision import PolicyProposal, as_ranking
from slate_explore.errors import PoolExhaustedError
from slate_explore.policy.base import Policy

logger = logging.getLogger(__name__)


class Scorer(Protocol):
    def predict(self, context: Any) -> Sequence[float]:
        """Returns one score per action, indexed by action."""
        ...


def _close_scorer(scorer: Scorer) -> None:
    close = getattr(scorer, 'close', None)
    if callable(close):
        close()


def _drain(pool: "queue.Queue[Scorer]") -> None:
    while True:
        try:
            scorer = pool.get_nowait()
        except queue.Empty:
            return
        _close_scorer(scorer)


class PooledPolicy(Policy):
    """
    Policy backed by a bounded pool of scorer instances.

    Each call checks out one scorer and always hands it back, including when
    the scorer raises. Scorer errors are not caught. Scorers belonging to a
    pool that was replaced or closed are closed when they come back.
    """

    def __init__(
        self,
        scorer_factory: Callable[[], Scorer],
        size: int = 4,
        acquire_timeout: Optional[float] = 1.0,
    ):
        if size < 1:
            raise ValueError(f"pool size must be positive, got {size}")
        self.size = size
        self.acquire_timeout = acquire_timeout
        self._lock = threading.Lock()
        self._pool = self._build_pool(scorer_factory)

    def _build_pool(self, scorer_factory: Callable[[], Scorer]) -> "queue.Queue[Scorer]":
        pool: "queue.Queue[Scorer]" = queue.Queue(maxsize=self.size)
        for _ in range(self.size):
            pool.put_nowait(scorer_factory())
        return pool

    @contextmanager
    def _acquire(self) -> Iterator[Scorer]:
        pool = self._pool
        try:
            scorer = pool.get(timeout=self.acquire_timeout)
        except queue.Empty:
            raise PoolExhaustedError(
                f"no scorer available after {self.acquire_timeout}s (pool size {self.size})"
            ) from None
        try:
            yield scorer
        finally:
            with self._lock:
                retired = pool is not self._pool
                if not retired:
                    pool.put_nowait(scorer)
            if retired:
                _close_scorer(scorer)

    def decide(self, context: Any, expected_count: int) -> PolicyProposal:
        with self._acquire() as scorer:
            scores = [float(s) for s in scorer.predict(context)]

        ranking = sorted(range(len(scores)), key=lambda action: (-scores[action], action))
        return PolicyProposal(
            ranking=as_ranking(ranking),
            policy_state={'scores': [scores[action] for action in ranking]},
        )

    def update_model(self, scorer_factory: Callable[[], Scorer]) -> None:
        """
        Replaces every pooled scorer with instances from a new factory.
        Idle scorers of the old pool are closed now, checked-out ones on release.
        """
        new_pool = self._build_pool(scorer_factory)
        with self._lock:
            old_pool, self._pool = self._pool, new_pool
            _drain(old_pool)
        logger.info("scorer pool rebuilt with %d instances", self.size)

    def close(self) -> None:
        """Closes idle scorers; scorers still checked out are closed on release."""
        with self._lock:
            old_pool, self._pool = self._pool, queue.Queue(maxsize=self.size)
            _drain(old_pool)
