
from typing import Any, Protocol
from slate_explore.decision import PolicyProposal

class Policy(Protocol):
    def decide(self, context: Any, expected_count: int) -> PolicyProposal:
        """
        Contextを受け取り、0始まりのアクション順位(ranking)と
        任意の内部状態(policy_state)を返す。
        複数スレッドから同時に呼ばれても安全であること。
        """
        ...
