"""Runtime settings read from ``DEPRUN_*`` environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .analysis import PYPI_URL
from .job import PACKAGE_MANAGER


class UpdaterSettings(BaseSettings):
    """Configuration for an update run (``DEPRUN_*`` namespace)."""

    model_config = SettingsConfigDict(env_prefix="DEPRUN_", extra="ignore")

    api_url: str | None = Field(
        default=None, description="Reporting API base URL; unset means dry run"
    )
    job_id: str | None = Field(default=None, description="Update job identifier")
    job_token: str | None = Field(default=None, description="Reporting API token")
    pypi_url: str = Field(default=PYPI_URL, description="PyPI JSON API base URL")
    python_version: str | None = Field(
        default=None, description="Target Python version for compatibility filtering"
    )
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    package_manager: str = Field(
        default=PACKAGE_MANAGER, description="Package manager identifier jobs must match"
    )
    log_level: str = Field(default="INFO", description="Logging level")
