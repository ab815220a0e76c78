
import json
import operator
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from slate_explore.errors import ValidationError

SCHEMA_VERSION = 1

Ranking = Tuple[int, ...]


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"isExplore must be a boolean, got {value!r}")
    return value


def as_ranking(actions: Sequence[int]) -> Ranking:
    return tuple(operator.index(a) for a in actions)


@dataclass(frozen=True)
class PolicyProposal:
    ranking: Ranking
    policy_state: Any = None


@dataclass(frozen=True)
class ExplorerState:
    epsilon: float
    baseline_ranking: Ranking
    is_explore: bool


@dataclass(frozen=True)
class Decision:
    chosen_ranking: Ranking
    explorer_state: ExplorerState
    policy_proposal: PolicyProposal

    def to_dict(self) -> Dict[str, Any]:
        """
        Versioned record consumed by logging and offline replay.
        Field names are part of the wire format and must stay stable.
        """
        return {
            "version": SCHEMA_VERSION,
            "chosenRanking": list(self.chosen_ranking),
            "explorerState": {
                "epsilon": self.explorer_state.epsilon,
                "baselineRanking": list(self.explorer_state.baseline_ranking),
                "isExplore": self.explorer_state.is_explore,
            },
            "policyProposal": {
                "ranking": list(self.policy_proposal.ranking),
                "policyState": self.policy_proposal.policy_state,
            },
        }

    def to_json(self) -> str:
        # policyState is opaque; values json cannot encode are written as repr()
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), default=repr)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Decision":
        version = data.get("version")
        if version != SCHEMA_VERSION:
            raise ValidationError(f"unsupported decision record version: {version!r}")

        try:
            state = data["explorerState"]
            proposal = data["policyProposal"]
            return cls(
                chosen_ranking=as_ranking(data["chosenRanking"]),
                explorer_state=ExplorerState(
                    epsilon=float(state["epsilon"]),
                    baseline_ranking=as_ranking(state["baselineRanking"]),
                    is_explore=_as_bool(state["isExplore"]),
                ),
                policy_proposal=PolicyProposal(
                    ranking=as_ranking(proposal["ranking"]),
                    policy_state=proposal.get("policyState"),
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"malformed decision record: {e}") from e
