"""
参照抽出パイプライン

段落を Locator の順に一つずつ処理し、各段落で
  1. 法令名・定義済み略称の検索
  2. 略称定義の検出と直前の法令名への紐付け
  3. 同法/同令の検出と紐付け
  4. 後続の条項番号の読み取り
を行って ResolvedReference を出力する。

略称は後の段落でも使われるため、紐付けた略称定義を AbbreviationState に
蓄積して次の段落へ渡す。状態は一つの文書の処理の間だけ存在し、
文書をまたいで共有しない。

前提条件: paragraphs は Locator の順序（locator.sort_locators）で並んでいること。
順序が異なると略称・同法の紐付けが誤る（検査はしない）。
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple

from .detectors import find_abbreviation_definitions, find_anaphora
from .linker import link_all
from .locator import Locator
from .matcher import find_law_names
from .mentions import Mention, ResolvedReference, Span, resolve_overlap
from .trailing import attach_trailing_locator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbbreviationState:
    """これまでの段落で紐付けられた略称定義（発見順）"""
    entries: Tuple[Mention, ...] = ()

    def extend(self, declarations: Iterable[Mention]) -> "AbbreviationState":
        return AbbreviationState(self.entries + tuple(declarations))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ParagraphScan:
    """一つの段落の処理結果"""
    mentions: List[Mention]
    declarations: List[Mention]


def _fold(mentions: Sequence[Mention], additions: Iterable[Mention]) -> List[Mention]:
    result = list(mentions)
    for mention in additions:
        result = resolve_overlap(result, mention)
    return result


def scan_paragraph(
    text: str,
    law_table: Mapping[str, Locator],
    state: AbbreviationState,
) -> ParagraphScan:
    """
    段落テキストから法令名・略称・同法/同令の出現を集める

    Returns:
        ParagraphScan（mentions は重複解消済み、declarations は紐付け済みの略称定義）
    """
    # 正式名称と定義済み略称でテキスト内検索
    mentions = find_law_names(text, law_table, state.entries)

    # 略称の定義箇所を法令名に紐付ける
    declarations = link_all(find_abbreviation_definitions(text), mentions)
    mentions = _fold(mentions, declarations)

    # 同法・同令は同じ段落で定義された略称にも紐付く
    anaphora = link_all(find_anaphora(text), mentions)
    mentions = _fold(mentions, anaphora)

    return ParagraphScan(mentions=mentions, declarations=declarations)


def extract_paragraph_references(
    source: Locator,
    text: str,
    law_table: Mapping[str, Locator],
    state: AbbreviationState,
) -> Tuple[List[ResolvedReference], AbbreviationState]:
    """
    一つの段落を処理する

    Returns:
        (この段落の参照リスト, 次の段落に渡す略称の状態)
    """
    scan = scan_paragraph(text, law_table, state)

    references = []
    for mention in sorted(scan.mentions, key=lambda m: m.span.start):
        if mention.target is None:
            continue
        target, end = attach_trailing_locator(text, mention)
        references.append(ResolvedReference(
            source=source,
            target=target,
            span=Span(mention.span.start, end),
        ))

    # 略称は他の段落でも使うので追加（同法・同令は追加しない）
    return references, state.extend(scan.declarations)


def extract_references(
    paragraphs: Iterable[Tuple[Locator, str]],
    law_table: Mapping[str, Locator],
) -> List[ResolvedReference]:
    """
    文書内の全段落から参照を抽出する

    Args:
        paragraphs: (段落の Locator, 段落テキスト) を Locator の順に並べたもの
        law_table: 法令名・法令番号 → 法令の Locator

    Returns:
        段落順・段落内の出現順に並んだ ResolvedReference のリスト
    """
    state = AbbreviationState()
    results: List[ResolvedReference] = []

    for source, text in paragraphs:
        logger.debug(f"[START] parse paragraph {source.describe()}")
        references, state = extract_paragraph_references(source, text, law_table, state)
        results.extend(references)
        logger.debug(
            f"[END] parse paragraph {source.describe()}: "
            f"{len(references)} reference(s), {len(state)} abbreviation(s) known"
        )

    return results
