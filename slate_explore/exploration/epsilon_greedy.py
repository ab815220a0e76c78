
import math
from typing import Any, List, Optional, Sequence

from slate_explore.decision import Decision, ExplorerState, PolicyProposal, Ranking, as_ranking
from slate_explore.errors import ConfigurationError
from slate_explore.policy.base import Policy
from slate_explore.random_source import RandomSource
from slate_explore.validation import validate_action_count, validate_ranking


def shuffled_ranking(random_source: RandomSource, count: int) -> Ranking:
    """
    Uniform random permutation of 0..count-1 (partial in-place shuffle).

    Position i is swapped with an index drawn from [i, count-1], so every
    ordering is equally likely and exactly count-1 draws are consumed.
    """
    actions: List[int] = list(range(count))
    for i in range(count - 1):
        swap_index = random_source.uniform_int(i, count - 1)
        actions[i], actions[swap_index] = actions[swap_index], actions[i]
    return tuple(actions)


class EpsilonGreedySlateStrategy:
    """
    Epsilon-Greedy over whole slates:
    with probability 1 - epsilon the policy's ranking is returned unchanged
    (exploit), otherwise a uniformly random permutation (explore).

    The explorer state always keeps the policy's ranking as the baseline so
    the probability of the logged slate can be recomputed offline.
    """
    tag = "epsilon_greedy_slate"

    def __init__(self, default_policy: Policy, epsilon: float, max_actions: Optional[int] = None):
        # NaN fails both comparisons
        if not 0.0 <= epsilon <= 1.0:
            raise ConfigurationError(f"epsilon must be in [0, 1], got {epsilon}")
        if max_actions is not None and max_actions < 0:
            raise ConfigurationError(f"max_actions must not be negative, got {max_actions}")

        self.default_policy = default_policy
        self.epsilon = float(epsilon)
        self.max_actions = max_actions

    def decide(self, salted_seed: int, context: Any, expected_count: int, explore: bool) -> Decision:
        validate_action_count(expected_count, self.max_actions)

        proposal = self.default_policy.decide(context, expected_count)
        validate_ranking(proposal.ranking, expected_count)
        proposal = PolicyProposal(ranking=as_ranking(proposal.ranking), policy_state=proposal.policy_state)

        # Nothing random happens before this point.
        random_source = RandomSource(salted_seed)
        epsilon = self.epsilon if explore else 0.0

        if random_source.uniform_unit_interval() < 1.0 - epsilon:
            chosen = proposal.ranking
            is_explore = False
        else:
            chosen = shuffled_ranking(random_source, expected_count)
            is_explore = True

        return Decision(
            chosen_ranking=chosen,
            explorer_state=ExplorerState(
                epsilon=self.epsilon,
                baseline_ranking=proposal.ranking,
                is_explore=is_explore,
            ),
            policy_proposal=proposal,
        )


def ranking_probability(state: ExplorerState, ranking: Sequence[int], exploration_permitted: bool) -> float:
    """
    Probability that the epsilon-greedy strategy produced `ranking`,
    reconstructed from the logged explorer state alone.
    """
    count = len(state.baseline_ranking)
    validate_ranking(ranking, count)

    epsilon = state.epsilon if exploration_permitted else 0.0
    # epsilon / count!, underflowing to 0.0 for very long slates
    probability = epsilon * math.exp(-math.lgamma(count + 1))
    if as_ranking(ranking) == state.baseline_ranking:
        probability += 1.0 - epsilon
    return probability
