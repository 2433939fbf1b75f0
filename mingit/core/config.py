"""Configuration lookup for mingit.

Only the CLI reads configuration: it needs a default author identity
for new commits. The core never consults it.
"""

import os
import configparser
from pathlib import Path
from typing import Optional


class Config:
    """
    Reads mingit configuration files.

    Configuration is stored in INI format, similar to Git:
    - Global config: ~/.mingitconfig
    - Repository config: <repository>/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.mingitconfig'

    def __init__(self, repo_config_path: Optional[Path] = None,
                 global_config_path: Optional[Path] = None):
        """
        Initialize Config reader.

        Args:
            repo_config_path: Path to repository config file, if in a repo
            global_config_path: Override for the global config location
        """
        self.repo_config_path = repo_config_path
        self.global_config_path = global_config_path or self.GLOBAL_CONFIG_PATH
        self._global_config = None
        self._repo_config = None

    @staticmethod
    def _load(path: Path) -> configparser.ConfigParser:
        # Git writes repeated keys and tab-indented options.
        config = configparser.ConfigParser(strict=False, interpolation=None)
        if path.exists():
            text = '\n'.join(line.strip() for line in path.read_text().splitlines())
            config.read_string(text, source=str(path))
        return config

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = self._load(self.global_config_path)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        """Load and return repository configuration."""
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = self._load(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (MINGIT_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value

        Args:
            section: Config section (e.g., 'user')
            key: Config key (e.g., 'name', 'email')
            fallback: Default value if not found

        Returns:
            Configuration value or fallback
        """
        env_value = os.environ.get(f"MINGIT_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def get_user_identity(self) -> tuple:
        """
        Get user name and email for commits.

        GIT_AUTHOR_NAME / GIT_AUTHOR_EMAIL are honoured after the
        MINGIT_USER_* variables and before any config file.

        Returns:
            Tuple of (name, email), either may be None
        """
        name = os.environ.get('MINGIT_USER_NAME') or os.environ.get('GIT_AUTHOR_NAME')
        email = os.environ.get('MINGIT_USER_EMAIL') or os.environ.get('GIT_AUTHOR_EMAIL')
        return name or self.get('user', 'name'), email or self.get('user', 'email')


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config

    Returns:
        Config instance
    """
    if repo:
        return Config(repo.config_file)
    return Config()
