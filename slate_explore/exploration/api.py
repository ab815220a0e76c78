
import hashlib
import logging
from typing import Any, Dict, Optional, Protocol

from slate_explore.config import ExplorationConfig
from slate_explore.decision import Decision
from slate_explore.errors import ConfigurationError, ValidationError
from slate_explore.exploration.epsilon_greedy import EpsilonGreedySlateStrategy
from slate_explore.policy.base import Policy
from slate_explore.random_source import SEED_MASK

logger = logging.getLogger(__name__)


class SlateStrategy(Protocol):
    tag: str

    def decide(self, salted_seed: int, context: Any, expected_count: int, explore: bool) -> Decision:
        ...


def _hash64(data: bytes) -> int:
    return int.from_bytes(hashlib.sha256(data).digest()[:8], "big")


def salt_seed(seed: int, tag: str) -> int:
    """
    Mixes a per-event seed with the strategy's tag.

    SHA-256 over the 8-byte big-endian seed followed by the UTF-8 tag; the
    first 8 bytes of the digest are the salted seed. Different strategies fed
    the same event seed start from unrelated generator states.
    """
    if seed < 0:
        raise ValidationError(f"seed must be non-negative, got {seed}")
    return _hash64((seed & SEED_MASK).to_bytes(8, "big") + tag.encode("utf-8"))


def seed_from_event_id(event_id: str) -> int:
    """Derives a 64-bit event seed from a string identifier such as a request id."""
    return _hash64(event_id.encode("utf-8"))


class Explorer:
    def __init__(self, strategy: SlateStrategy):
        self.strategy = strategy

    def decide(
        self,
        seed: int,
        context: Any,
        expected_count: int,
        exploration_permitted: bool,
    ) -> Decision:
        """
        Salts `seed` for the wrapped strategy and returns its decision.

        Args:
            seed: Per-event seed (unsigned, 64 bits or wider).
            context: Opaque caller context, passed through to the policy.
            expected_count: Number of actions the ranking must contain.
            exploration_permitted: Host-controlled switch; when False the
                strategy behaves as if epsilon were 0.

        Raises:
            ValidationError: The policy returned an invalid ranking or the
                action count is out of bounds. No random draw is made.
        """
        salted = salt_seed(seed, self.strategy.tag)
        decision = self.strategy.decide(salted, context, expected_count, exploration_permitted)
        logger.debug(
            "strategy=%s seed=%d explore=%s chosen=%s",
            self.strategy.tag, seed, decision.explorer_state.is_explore, decision.chosen_ranking
        )
        return decision


STRATEGIES: Dict[str, type] = {
    "epsilon_greedy": EpsilonGreedySlateStrategy,
}


def get_explorer(method: str, policy: Policy, epsilon: float, max_actions: Optional[int] = None) -> Explorer:
    """
    Factory function to get an Explorer for the named strategy.

    Args:
        method (str): Key in STRATEGIES, e.g. "epsilon_greedy"
        policy (Policy): Policy producing the exploit ranking
        epsilon (float): Probability mass reserved for exploration
        max_actions (Optional[int]): Upper bound on expected_count

    Returns:
        Explorer: wrapping a new strategy instance.
    """
    strategy_cls = STRATEGIES.get(method)
    if strategy_cls is None:
        raise ConfigurationError(
            f"unknown exploration strategy {method!r}; expected one of {sorted(STRATEGIES)}"
        )
    return Explorer(strategy_cls(policy, epsilon, max_actions=max_actions))


def get_explorer_from_config(config: ExplorationConfig, policy: Policy) -> Explorer:
    return get_explorer(config.strategy, policy, config.epsilon, max_actions=config.max_actions)
