"""Configuration utilities.

Central place to load environment driven settings (datastore credentials, browser overrides, defaults).
Avoids scattering os.getenv calls around the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load .env once on module import
load_dotenv()


@dataclass(slots=True)
class Settings:
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_key: str | None = os.getenv("SUPABASE_ANON_KEY")
    flights_table: str = os.getenv("FLIGHTS_TABLE", "Flights")
    chrome_path: str | None = os.getenv("CHROME_PATH")
    headless: bool = os.getenv("HEADLESS", "false").lower() in ("1", "true", "yes")
    output_json: Path = Path(os.getenv("OUTPUT_JSON", "flights.json"))
    snapshot_dir: Path = Path(os.getenv("SNAPSHOT_DIR", "snapshots"))

    def datastore_configured(self) -> bool:
        return all([self.supabase_url, self.supabase_key])

    def require_datastore(self) -> None:
        if not self.datastore_configured():
            raise ConfigurationError("Supabase credentials are missing. Set SUPABASE_URL and SUPABASE_ANON_KEY.")


settings = Settings()
