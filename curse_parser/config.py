"""
Runtime settings for curse-parser.

Values come from keyword arguments or, via Settings.from_env(), from
CURSE_PARSER_* environment variables. The run script loads a .env file
first, so those variables may also live there.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "CURSE_PARSER_"

DEFAULT_USER_AGENT = "python-requests (compatible; curse-parser)"


class Settings(BaseModel):
    """Settings shared by the fetcher, the aggregator and the logger."""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = Field(default=30.0, gt=0)          # Seconds per GET
    log_level: str = "INFO"
    max_workers: int = Field(default=1, ge=1)           # 1 = walk listing pages sequentially

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """Build settings from CURSE_PARSER_* variables, keeping defaults for unset ones."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        # pydantic coerces "12.5" / "4" to the declared float / int
        return cls(**values)
