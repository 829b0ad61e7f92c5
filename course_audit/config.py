"""Configuration management for the unpublished course audit."""

import os
from pathlib import Path
from dataclasses import dataclass, field
from dotenv import load_dotenv

from .utils.exceptions import ConfigurationError

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
REPORTS_DIR = DATA_DIR / "reports"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class CanvasConfig:
    """Remote LMS API configuration."""

    api_url: str = os.getenv("CANVAS_API_URL", "")
    api_token: str = os.getenv("CANVAS_API_TOKEN", "")
    account_id: int = int(os.getenv("CANVAS_ACCOUNT_ID", "1"))
    read_timeout: int = int(os.getenv("READ_TIMEOUT", "120"))
    read_timeout_floor: int = 60


@dataclass
class RateLimitConfig:
    """Rate budget configuration."""

    max_quota: int = int(os.getenv("RATE_LIMIT_MAX", "700"))
    throttled_delay_seconds: float = 300.0  # 5 minutes after a 429
    cost_spike_ratio: float = 1.2
    cost_spike_delay_seconds: float = 30.0
    jitter_fraction: float = 0.25
    remaining_header: str = "X-Rate-Limit-Remaining"
    cost_header: str = "X-Request-Cost"


@dataclass
class AuditConfig:
    """Course selection and probing configuration."""

    term_prefix: str = os.getenv("TERM_PREFIX", "6253-")
    target_state: str = os.getenv("TARGET_WORKFLOW_STATE", "unpublished")
    front_page_view: str = "wiki"
    per_page: int = 100
    published_assignments_only: bool = _env_flag("PUBLISHED_ASSIGNMENTS_ONLY")


@dataclass
class AuditorConfig:
    """Main audit configuration."""

    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)

    # Paths
    data_dir: Path = DATA_DIR
    reports_dir: Path = REPORTS_DIR

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Path = BASE_DIR / "audit.log"

    def ensure_directories(self):
        """Create all required directories."""
        for directory in [self.data_dir, self.reports_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def validate(self) -> None:
        """
        Check that the settings needed to reach the API are present.

        Raises:
            ConfigurationError: If the API URL or token is missing
        """
        if not self.canvas.api_url:
            raise ConfigurationError("CANVAS_API_URL is not set")
        if not self.canvas.api_token:
            raise ConfigurationError("CANVAS_API_TOKEN is not set")
        if self.rate_limit.max_quota <= 0:
            raise ConfigurationError("RATE_LIMIT_MAX must be positive")


# Global config instance
config = AuditorConfig()
