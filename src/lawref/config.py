import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
CACHE_DIR = Path(os.getenv("LAWREF_CACHE_DIR", PROJECT_ROOT / "cache"))
OUTPUT_DIR = Path(os.getenv("LAWREF_OUTPUT_DIR", PROJECT_ROOT / "output"))

# e-Gov API
EGOV_API_BASE_URL = "https://laws.e-gov.go.jp/api/1"
EGOV_API_V2_BASE_URL = "https://laws.e-gov.go.jp/api/2"
EGOV_LAW_URL = "https://laws.e-gov.go.jp/law"

# ELI
ELI_BASE_URI = os.getenv("LAWREF_ELI_BASE_URI", "https://github.com/puripuri2100-research/eli")

# 改正法令IDが無い場合（制定時の版）
DEFAULT_PATCH_ID = "000000000000000"

# Batch
DEFAULT_JOBS = 2

# User Agent
USER_AGENT = "lawref/0.1.0"
