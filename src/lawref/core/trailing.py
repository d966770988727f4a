"""
法令名の後ろに続く条項番号の読み取り

「都市計画法（昭和四十三年法律第百号）第四条第二項に規定する」のように、
法令名の後の括弧書きを飛ばし、その後に続く「第○条第○項」を参照先に反映する。
"""
import logging
import re
from typing import Dict, List, Tuple

from .locator import Locator
from .mentions import Mention
from ..utils.numerals import ArticleNumber, parse_article_number

logger = logging.getLogger(__name__)

_NUMERALS = '〇一二三四五六七八九十百千'

# 区分文字 → Locator のフィールド
CLASSIFIER_FIELDS: Dict[str, str] = {
    '編': 'part',
    '章': 'chapter',
    '節': 'section',
    '款': 'subsection',
    '目': 'division',
    '条': 'article',
    '項': 'paragraph',
}

# 条項番号として読み進める文字
LOCATOR_CHARS = frozenset('第のノ' + _NUMERALS + ''.join(CLASSIFIER_FIELDS))

# 第(N)(区分)(のM)*
LOCATOR_SEGMENT_PATTERN = re.compile(
    rf'第[{_NUMERALS}]+([{"".join(CLASSIFIER_FIELDS)}])(?:[のノ][{_NUMERALS}]+)*'
)
LOCATOR_RUN_PATTERN = re.compile(rf'(?:{LOCATOR_SEGMENT_PATTERN.pattern})+')


def collect_trailing_run(text: str, start: int) -> Tuple[str, List[int]]:
    """
    start から条項番号に使われる文字を集める

    全角かっこの中は丸ごと読み飛ばす。かっこの外で対象外の文字が
    出たら終了する。閉じかっこが対応する開きかっこ無しに現れた場合も終了する
    （法令名自体がかっこ書きの中にあったとみなす）。

    Returns:
        (集めた文字列, 各文字の text 内の位置)
    """
    chars: List[str] = []
    positions: List[int] = []
    depth = 0
    for i in range(start, len(text)):
        c = text[i]
        if c == '（':
            depth += 1
            continue
        if c == '）':
            if depth == 0:
                break
            depth -= 1
            continue
        if depth > 0:
            continue
        if c in LOCATOR_CHARS:
            chars.append(c)
            positions.append(i)
            continue
        break

    # 末尾が'の', 'ノ'ならばそれを取り除く
    if chars and chars[-1] in ('の', 'ノ'):
        chars.pop()
        positions.pop()
    return ''.join(chars), positions


def attach_trailing_locator(text: str, mention: Mention) -> Tuple[Locator, int]:
    """
    mention の直後の条項番号を読み取り、参照先に反映する

    Args:
        text: 段落テキスト
        mention: 参照先が解決済みの出現

    Returns:
        (条項番号を設定した参照先, 参照範囲の終端)
        条項番号が無ければ (mention.target, mention.span.end)
    """
    target = mention.target
    end = mention.span.end
    run, positions = collect_trailing_run(text, end)
    logger.debug(f"Trailing locator string: '{run}'")

    match = LOCATOR_RUN_PATTERN.match(run)
    if target is None or not match:
        return target, end

    numbers: Dict[str, ArticleNumber] = {}
    for segment in LOCATOR_SEGMENT_PATTERN.finditer(match.group(0)):
        num = parse_article_number(segment.group(0))
        logger.debug(f"parsed article number: {segment.group(0)} -> {num}")
        if num is None:
            continue
        numbers[CLASSIFIER_FIELDS[segment.group(1)]] = num

    if not numbers:
        return target, end
    return target.with_numbers(**numbers), positions[match.end() - 1] + 1
