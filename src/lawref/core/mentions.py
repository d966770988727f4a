"""
法令名の出現（Mention）と抽出結果（ResolvedReference）

- Span: 段落テキスト内の文字単位の半開区間 [start, end)
- Mention: 法令名・略称・略称定義・同法/同令 の出現
- ResolvedReference: 参照元段落 → 参照先 Locator の対応

出現リストの重複解消（resolve_overlap）と、
「法令名（法令番号）」形式での法令番号側の除去（merge_name_and_number）もここで行う。
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence

from .locator import Locator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Span:
    """文字単位の半開区間 [start, end)"""
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Invalid span: start={self.start} > end={self.end}")

    def contains(self, other: "Span") -> bool:
        """other がこの区間に含まれる（等しい場合も含む）"""
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end


class MentionKind(str, Enum):
    """出現の種類"""
    NAME = "name"                  # 法令名・法令番号（法令名テーブル由来）
    ABBREVIATION = "abbreviation"  # 前の段落までに定義された略称の使用
    DECLARATION = "declaration"    # 略称の定義（以下「○○法」という。）
    ANAPHORA = "anaphora"          # 同法・同令


@dataclass(frozen=True)
class Mention:
    """
    法令名の出現

    target が None になるのは、見つかった直後でまだ紐付けていない
    略称定義と同法/同令だけ。
    """
    span: Span
    text: str
    target: Optional[Locator] = None
    kind: MentionKind = MentionKind.NAME

    @property
    def is_resolved(self) -> bool:
        return self.target is not None

    def resolved_to(self, target: Locator) -> "Mention":
        return replace(self, target=target)


@dataclass(frozen=True)
class ResolvedReference:
    """参照抽出の結果: source 段落の span の位置で target を参照している"""
    source: Locator
    target: Locator
    span: Span


# ==============================================================================
# 重複解消
# ==============================================================================

def resolve_overlap(mentions: Sequence[Mention], candidate: Mention) -> List[Mention]:
    """
    範囲が重複した出現について、重複を解消した新しいリストを返す

    - 範囲が完全に一致 → 後から見つかった candidate に置き換え
      （法令名中の略称のように、後で見つかったものを優先する）
    - 既存の方が小さい（candidate に含まれる）→ candidate に置き換え
    - candidate の方が小さい（既存に含まれる）→ 既存を残し candidate は捨てる
    - 無関係 → そのまま

    置き換え・破棄が一度起きたら、残りの要素はそのまま残す。
    入力の mentions は常に重複解消済みであることを前提とする。
    """
    result: List[Mention] = []
    handled = False
    for existing in mentions:
        if handled:
            result.append(existing)
        elif existing.span == candidate.span:
            result.append(candidate)
            handled = True
        elif candidate.span.contains(existing.span):
            result.append(candidate)
            handled = True
        elif existing.span.contains(candidate.span):
            result.append(existing)
            handled = True
        else:
            result.append(existing)

    if not handled:
        result.append(candidate)
    return result


def _is_name_and_number(first: Mention, second: Mention, text: str) -> bool:
    """
    first が法令名、second がその直後の括弧内の法令番号か

    - first の終端と second の開始の差が 1
    - その間の文字が全角かっこ「（」
    - 同一の法令を指している
    - first は「号」で終わらず、second は「号」で終わる
    """
    if first.target is None or second.target is None:
        return False
    return (
        second.span.start - first.span.end == 1
        and text[first.span.end:first.span.end + 1] == '（'
        and first.target.law_id == second.target.law_id
        and not first.text.endswith('号')
        and second.text.endswith('号')
    )


def merge_name_and_number(mentions: Sequence[Mention], text: str) -> List[Mention]:
    """
    「法令名（法令番号）」の法令番号側を取り除く

    「内閣は、消防施設強化促進法（昭和二十八年法律第八十七号）第三条の規定に基き、
    この政令を制定する。」のような文では、法令名と法令番号の両方が同じ法令に
    マッチする。法令名側を正とし、後ろにある法令番号側を削除する。
    """
    redundant = set()
    for i, first in enumerate(mentions):
        for j, second in enumerate(mentions):
            if i == j or first.span.start >= second.span.start:
                continue
            if _is_name_and_number(first, second, text):
                logger.debug(f"Drop law number '{second.text}' following '{first.text}'")
                redundant.add(j)

    return [m for k, m in enumerate(mentions) if k not in redundant]
