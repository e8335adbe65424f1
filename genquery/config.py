import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
GLOBAL_MAX_PAGE_SIZE = int(os.getenv("GLOBAL_MAX_PAGE_SIZE", "1000"))

COLUMNS_FILE = Path(
    os.getenv(
        "GENQUERY_COLUMNS_FILE",
        str(Path(__file__).parent / "registry" / "generations.yaml"),
    )
)

# mirror upper-bound startTime filters onto traces.timestamp
DATETIME_SHORTCUT = os.getenv("GENQUERY_DATETIME_SHORTCUT", "true").lower() == "true"

STATEMENT_TIMEOUT_MS = int(os.getenv("GENQUERY_STATEMENT_TIMEOUT_MS", "0"))  # 0 = server default
APPLICATION_NAME = os.getenv("GENQUERY_APPLICATION_NAME", "api:generations")

CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "").split(",") if o.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
