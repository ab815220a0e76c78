
from slate_explore.config import ExplorationConfig

class ExplorationGate:
    def is_permitted(self, user_hash: int, config: ExplorationConfig) -> bool:
        """
        ホスト側の探索スイッチ。
        config.exploration_enabled が False なら常に探索不可。
        有効な場合は user_hash をもとにサンプリング判定を行い、
        対象トラフィックであれば True を返す。

        ハッシュ値の正規化には 10000 の剰余を利用する (0.01%単位)。
        """
        if not config.exploration_enabled:
            return False

        normalized_hash = (user_hash % 10000) / 10000.0

        return normalized_hash < config.sampling_rate
