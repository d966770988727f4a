"""
ELI (European Legislation Identifier) と e-Gov 法令検索の URL

Locator から
- 「第二条第一項」のような条項番号テキスト
- e-Gov 法令検索の条項アンカー（#Mp-At_2-Pr_1）と公開 URL
- ELI 形式の URI
を生成する。いずれも Locator と設定値だけで決まる純粋関数。
"""
from typing import Optional

from .locator import Locator
from ..config import DEFAULT_PATCH_ID, EGOV_LAW_URL, ELI_BASE_URI

# Locator のフィールド → e-Gov 法令検索のアンカーの略号
EGOV_FRAGMENT_CODES = (
    ("part", "Pa"),
    ("chapter", "Ch"),
    ("section", "Se"),
    ("subsection", "Ss"),
    ("division", "Di"),
    ("article", "At"),
    ("paragraph", "Pr"),
)

STRUCTURE_FIELDS = ("part", "chapter", "section", "subsection", "division")


def number_text(locator: Locator) -> str:
    """
    条項番号のテキスト

    最上位の区画だけを表記する。条は項と合わせて表記する。

    Examples:
        第三章 / 第二条 / 第二条第一項 / 第一項（条の無い段落）
    """
    if locator.part is not None:
        return locator.part.part_text()
    if locator.chapter is not None:
        return locator.chapter.chapter_text()
    if locator.section is not None:
        return locator.section.section_text()
    if locator.subsection is not None:
        return locator.subsection.subsection_text()
    if locator.division is not None:
        return locator.division.division_text()
    if locator.article is not None:
        if locator.paragraph is not None:
            return locator.article.article_text() + locator.paragraph.paragraph_text()
        return locator.article.article_text()
    if locator.paragraph is not None:
        return locator.paragraph.paragraph_text()
    return ""


def egov_fragment(locator: Locator) -> Optional[str]:
    """
    e-Gov 法令検索の本則中の条項アンカー

    例: https://laws.e-gov.go.jp/law/129AC0000000089#Mp-Pa_3-Ch_1-Se_2-Ss_3-Di_4

    Returns:
        '#Mp-...'、番号が一つも無ければ None
    """
    parts = [
        f"-{code}_{getattr(locator, field).num_str()}"
        for field, code in EGOV_FRAGMENT_CODES
        if getattr(locator, field) is not None
    ]
    if not parts:
        return None
    return "#Mp" + "".join(parts)


def published_url(locator: Locator) -> str:
    """
    e-Gov 法令検索での公開 URL

    egov_link が設定されていればそれを返す。公布日が不明なら版を指定しない URL。
    """
    if locator.egov_link:
        return locator.egov_link
    fragment = egov_fragment(locator) or ""
    if locator.date is None:
        return f"{EGOV_LAW_URL}/{locator.law_id}{fragment}"
    patch_id = locator.patch_id or DEFAULT_PATCH_ID
    return f"{EGOV_LAW_URL}/{locator.law_id}/{locator.date:%Y%m%d}_{patch_id}{fragment}"


def eli_uri(locator: Locator, base: str = ELI_BASE_URI) -> str:
    """
    ELI 形式の URI

    {base}/{yyyy}/{mm}/{dd}/{種別}/{法令ID}/{改正法令ID}/article{n}/paragraph{n}

    条を含む Locator は編・章などを URI に含めない（本文中の「第○条」と
    文書側の条が同じ URI になる）。条の無い編・章・節・款・目は
    chapter{n} のような区画を順に付ける。

    例: .../eli/2024/12/12/mo/506M60000100140/000000000000000/article2/paragraph2
    """
    segments = [base.rstrip("/")]
    if locator.date is not None:
        segments.append(f"{locator.date:%Y/%m/%d}")
    segments.extend([
        locator.law_type.value,
        locator.law_id,
        locator.patch_id or DEFAULT_PATCH_ID,
    ])
    if locator.article is None:
        segments.extend(
            f"{field}{getattr(locator, field).num_str()}"
            for field in STRUCTURE_FIELDS
            if getattr(locator, field) is not None
        )
    else:
        segments.append(f"article{locator.article.num_str()}")
    if locator.paragraph is not None:
        segments.append(f"paragraph{locator.paragraph.num_str()}")
    return "/".join(segments)
