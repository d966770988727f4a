import logging
import time
from typing import Any, Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from .base import BaseClient
from ..config import EGOV_API_BASE_URL, EGOV_API_V2_BASE_URL
from ..core.document import xml_to_tree
from ..errors import DocumentParseError

logger = logging.getLogger(__name__)


def parse_law_list(xml_content: str) -> List[Dict[str, str]]:
    """
    lawlists API の XML から法令一覧を取り出す

    Returns:
        LawId, LawName, LawNo, PromulgationDate などをキーとする dict のリスト
    """
    soup = BeautifulSoup(xml_content, "xml")
    laws = []
    for info in soup.find_all("LawNameListInfo"):
        law = {}
        for child in info.children:
            if child.name:
                law[child.name] = child.text.strip()
        laws.append(law)
    return laws


def parse_law_data_xml(xml_content: str) -> Optional[Dict[str, Any]]:
    """
    v1 lawdata API の XML を v2 law_data と同じ形（law_full_text）にする

    法令本体が無ければ None
    """
    soup = BeautifulSoup(xml_content, "xml")
    law = soup.find("Law")
    if law is None:
        return None
    try:
        tree = xml_to_tree(str(law))
    except DocumentParseError:
        return None
    return {"law_full_text": tree}


class EGovClient(BaseClient):
    def __init__(self, **kwargs):
        kwargs.setdefault("rate_limit_sec", 0.5)
        super().__init__(**kwargs)
        self.base_url = EGOV_API_BASE_URL
        self.base_url_v2 = EGOV_API_V2_BASE_URL
        # v1 API は遅いことがある
        self.timeout_v1 = 180

    def fetch_law_list(self) -> List[Dict[str, str]]:
        """
        全法令の一覧（lawlists/1）を取得

        Raises:
            requests.RequestException: 取得に失敗
        """
        url = f"{self.base_url}/lawlists/1"
        xml_content = self.request("GET", url, cache_key="egov_law_list_v1_xml", response_type="text")
        laws = parse_law_list(xml_content)
        logger.info(f"Fetched {len(laws)} laws from law list")
        return laws

    def fetch_law_data(self, law_id: str) -> Optional[Dict[str, Any]]:
        """
        法令データを取得

        1. v2 API（law_data/{law_id}）の JSON
        2. 失敗したら v1 API（lawdata/{law_id}）の XML を同じ形に変換

        Returns:
            law_full_text（と revision_info）を持つ dict、どちらも失敗したら None
        """
        data = self._fetch_law_data_v2(law_id)
        if data is None:
            logger.info(f"Falling back to v1 API for {law_id}")
            data = self._fetch_law_data_v1(law_id)
        return data

    def _fetch_law_data_v2(self, law_id: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url_v2}/law_data/{law_id}"
        try:
            data = self.request("GET", url, cache_key=f"egov_law_data_v2_{law_id}")
        except requests.RequestException as e:
            logger.warning(f"v2 API error for {law_id}: {e}")
            return None
        if not isinstance(data, dict) or not data.get("law_full_text"):
            logger.warning(f"v2 API returned no law_full_text for {law_id}")
            return None
        return data

    def _fetch_law_data_v1(self, law_id: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/lawdata/{law_id}"
        self._wait_rate_limit()
        logger.info(f"Fetching (v1): {url}")
        try:
            resp = self.session.get(url, timeout=self.timeout_v1)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"v1 API error for {law_id}: {e}")
            return None
        finally:
            self.last_request_time = time.time()

        data = parse_law_data_xml(resp.text)
        if data is None:
            logger.error(f"v1 API returned no law body for {law_id}")
        return data
