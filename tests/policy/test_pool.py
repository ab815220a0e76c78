
import threading
import pytest
from unittest.mock import MagicMock
from slate_explore.errors import PoolExhaustedError
from slate_explore.policy.pool import PooledPolicy

class StubScorer:
    def __init__(self, scores):
        self.scores = scores
        self.closed = False

    def predict(self, context):
        return self.scores

    def close(self):
        self.closed = True

def test_decide_ranks_scores():
    policy = PooledPolicy(lambda: StubScorer([0.1, 0.7, 0.3]), size=2)
    proposal = policy.decide(None, 3)
    assert proposal.ranking == (1, 2, 0)
    assert proposal.policy_state == {'scores': [0.7, 0.3, 0.1]}

def test_scorer_returned_after_success():
    policy = PooledPolicy(lambda: StubScorer([1.0]), size=1, acquire_timeout=0.01)
    for _ in range(5):
        policy.decide(None, 1)
    assert policy._pool.qsize() == 1

def test_scorer_returned_after_failure():
    scorer = MagicMock()
    scorer.predict.side_effect = RuntimeError("scoring failed")
    policy = PooledPolicy(lambda: scorer, size=1, acquire_timeout=0.01)

    with pytest.raises(RuntimeError, match="scoring failed"):
        policy.decide(None, 1)
    assert policy._pool.qsize() == 1

def test_exhausted_pool_raises():
    release = threading.Event()
    entered = threading.Event()

    class BlockingScorer:
        def predict(self, context):
            entered.set()
            release.wait(5)
            return [1.0]

    policy = PooledPolicy(BlockingScorer, size=1, acquire_timeout=0.05)
    worker = threading.Thread(target=policy.decide, args=(None, 1))
    worker.start()
    try:
        assert entered.wait(5)
        with pytest.raises(PoolExhaustedError):
            policy.decide(None, 1)
    finally:
        release.set()
        worker.join()
    assert policy._pool.qsize() == 1

def test_update_model_swaps_scorers():
    policy = PooledPolicy(lambda: StubScorer([1.0, 0.0]), size=2)
    assert policy.decide(None, 2).ranking == (0, 1)

    policy.update_model(lambda: StubScorer([0.0, 1.0]))
    assert policy.decide(None, 2).ranking == (1, 0)
    assert policy._pool.qsize() == 2

def test_close_closes_scorers():
    scorers = []

    def factory():
        scorers.append(StubScorer([1.0]))
        return scorers[-1]

    policy = PooledPolicy(factory, size=3)
    policy.close()
    assert all(s.closed for s in scorers)
    assert policy._pool.qsize() == 0

def test_invalid_pool_size():
    with pytest.raises(ValueError):
        PooledPolicy(lambda: StubScorer([]), size=0)

def test_update_model_closes_old_scorers():
    scorers = []

    def factory(scores):
        def build():
            scorers.append(StubScorer(scores))
            return scorers[-1]
        return build

    policy = PooledPolicy(factory([1.0]), size=2)
    policy.update_model(factory([0.5]))

    # 旧プールのscorerは差し替え時にcloseされる
    assert [s.closed for s in scorers] == [True, True, False, False]

    policy.close()
    assert all(s.closed for s in scorers)

def test_scorer_checked_out_during_swap_is_closed_on_release():
    old = StubScorer([1.0])
    policy = PooledPolicy(lambda: old, size=1)

    with policy._acquire() as scorer:
        policy.update_model(lambda: StubScorer([0.0]))
        assert scorer.closed is False

    assert old.closed is True
    # 旧scorerは新プールに戻らない
    assert policy._pool.qsize() == 1
    assert policy._pool.get_nowait() is not old
