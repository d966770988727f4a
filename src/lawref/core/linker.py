"""
略称定義・同法/同令 を直前の法令名に紐付ける
"""
import logging
from typing import Iterable, List, Optional, Sequence

from .mentions import Mention

logger = logging.getLogger(__name__)


def link_to_antecedent(mention: Mention, candidates: Sequence[Mention]) -> Optional[Mention]:
    """
    mention より前で終わる出現のうち、最も近いもの（終端が最大のもの）の参照先を設定する

    終端が同じ候補が複数あれば、リストの後ろにある方を採用する。

    Args:
        mention: 未解決の略称定義または同法/同令
        candidates: この段落で見つかっている法令名・略称の出現

    Returns:
        参照先を設定した Mention、前に法令名が無ければ None
    """
    antecedent: Optional[Mention] = None
    for candidate in candidates:
        if candidate.target is None or candidate.span.end > mention.span.start:
            continue
        if antecedent is not None and candidate.span.end < antecedent.span.end:
            # すでに見つかったものよりも遠い
            continue
        antecedent = candidate

    if antecedent is None:
        logger.debug(f"No antecedent for '{mention.text}' at {mention.span.start}")
        return None
    return mention.resolved_to(antecedent.target)


def link_all(mentions: Iterable[Mention], candidates: Sequence[Mention]) -> List[Mention]:
    """紐付けできたものだけを返す"""
    linked = []
    for mention in mentions:
        resolved = link_to_antecedent(mention, candidates)
        if resolved is not None:
            linked.append(resolved)
    return linked
