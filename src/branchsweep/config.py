"""Configuration management for branchsweep."""

import os
from pathlib import Path
from typing import Optional, Dict, Any
import toml
from pydantic import BaseModel, Field, ConfigDict

DEFAULT_API_URL = "https://api.github.com"


class ProfileConfig(BaseModel):
    """Credentials for one remote hosting account."""

    api_url: str = Field(
        default=DEFAULT_API_URL, description="Base URL of the hosting REST API"
    )
    token: str = Field(description="Bearer token presented to the API")


class SweepConfig(BaseModel):
    """Settings stored in ~/.branchsweep/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    api_url: str = Field(
        default=DEFAULT_API_URL, description="API URL used when no profile is active"
    )
    tag_prefix: str = Field(default="archive", description="Default archive tag prefix")
    max_workers: int = Field(
        default=8, ge=1, le=64, description="Concurrent remote calls per batch"
    )
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout (s)")
    retries: int = Field(default=3, ge=0, description="Retries for idempotent reads")
    per_page: int = Field(default=100, ge=1, le=100, description="Listing page size")
    max_pages: int = Field(default=10, ge=1, description="Listing page ceiling")
    active_profile: Optional[str] = Field(
        default=None, description="Currently active profile alias"
    )
    profiles: Dict[str, ProfileConfig] = Field(
        default_factory=dict, description="Credential profiles by alias"
    )

    def active_credentials(self) -> Optional[ProfileConfig]:
        """Return the active profile, if one is set and configured."""
        if self.active_profile and self.active_profile in self.profiles:
            return self.profiles[self.active_profile]
        return None


class Config:
    """Manages branchsweep configuration."""

    def __init__(self, home_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            home_dir: Directory holding ``.branchsweep``. If None, uses BRANCHSWEEP_HOME env var or the user's home.
        """
        if home_dir is None:
            env_dir = os.environ.get("BRANCHSWEEP_HOME")
            if env_dir:
                home_dir = Path(env_dir)

        self.home_dir = Path(home_dir) if home_dir else Path.home()
        self.config_dir = self.home_dir / ".branchsweep"
        self.config_path = self.config_dir / "config.toml"
        self._config: Optional[SweepConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def load(self) -> SweepConfig:
        """Load configuration from disk, with environment variable overrides."""
        if not self.exists:
            raise FileNotFoundError(f"Config file not found at {self.config_path}")

        with open(self.config_path, "r") as f:
            data = toml.load(f)

        return self._build(data)

    def load_or_default(self) -> SweepConfig:
        """Load configuration, falling back to defaults when no file exists."""
        if self.exists:
            return self.load()
        return self._build({})

    def _build(self, data: Dict[str, Any]) -> SweepConfig:
        self._apply_env_overrides(data)

        if "profiles" in data:
            for alias, profile_data in data["profiles"].items():
                if isinstance(profile_data, dict):
                    data["profiles"][alias] = ProfileConfig(**profile_data)

        self._config = SweepConfig(**data)
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        if env_prefix := os.environ.get("BRANCHSWEEP_TAG_PREFIX"):
            data["tag_prefix"] = env_prefix

        if env_workers := os.environ.get("BRANCHSWEEP_MAX_WORKERS"):
            data["max_workers"] = int(env_workers)

        env_url = os.environ.get("BRANCHSWEEP_API_URL")
        env_token = os.environ.get("BRANCHSWEEP_TOKEN")

        if env_url and not env_token:
            data["api_url"] = env_url.rstrip("/")

        if env_token:
            # Create or update "env" profile
            if "profiles" not in data:
                data["profiles"] = {}

            data["profiles"]["env"] = {
                "api_url": (env_url or data.get("api_url", DEFAULT_API_URL)).rstrip(
                    "/"
                ),
                "token": env_token,
            }

            # Make it active if no other profile is set
            if not data.get("active_profile"):
                data["active_profile"] = "env"

    def save(self, config: Optional[SweepConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = self._config.model_dump(exclude_none=True)
        # The env profile only ever comes from the environment
        config_dict.get("profiles", {}).pop("env", None)
        if config_dict.get("active_profile") == "env":
            config_dict.pop("active_profile")

        # Tokens live here: owner-only before anything is written
        fd = os.open(self.config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.chmod(self.config_path, 0o600)
        with os.fdopen(fd, "w") as f:
            toml.dump(config_dict, f)

    def init(self) -> SweepConfig:
        """Write a default configuration file.

        Raises:
            FileExistsError: If a config file already exists
        """
        if self.exists:
            raise FileExistsError(f"Config file already exists at {self.config_path}")

        self._config = SweepConfig()
        self.save()
        return self._config
