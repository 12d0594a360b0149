"""Configuration management for minigit.

Repository-local and global INI configuration, plus the author/committer
identity strings recorded in commits.
"""

import configparser
import os
import time
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_NAME = 'User'
DEFAULT_EMAIL = 'user@example.com'


def default_global_config_path() -> Path:
    override = os.environ.get('MINIGIT_GLOBAL_CONFIG')
    if override:
        return Path(override)
    return Path.home() / '.minigitconfig'


class Config:
    """
    Manages minigit configuration files.

    Configuration is stored in INI format, similar to Git:
    - Global config: ~/.minigitconfig (or $MINIGIT_GLOBAL_CONFIG)
    - Repository config: .minigit/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    def __init__(self, repo_config_path: Optional[Path] = None, global_config_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            repo_config_path: Path to repository config file, if in a repo
            global_config_path: Path to the global config file
        """
        self.repo_config_path = Path(repo_config_path) if repo_config_path else None
        self.global_config_path = Path(global_config_path) if global_config_path else default_global_config_path()
        self._global_config = None
        self._repo_config = None

    @staticmethod
    def _load(path: Optional[Path]) -> configparser.ConfigParser:
        parser = configparser.ConfigParser()
        if path and path.exists():
            parser.read(path)
        return parser

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
        1. Environment variables (MINIGIT_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value
        """
        env_value = os.environ.get(f"MINIGIT_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def get_user_identity(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Get user name and email for commits.

        Returns:
            Tuple of (name, email), either may be None
        """
        return self.get('user', 'name'), self.get('user', 'email')


def build_identity(role: str = 'author', config: Optional[Config] = None, now: Optional[int] = None) -> str:
    """
    Build an identity string ``Name <email> <epoch> <tz>``.

    Reads ``GIT_<ROLE>_NAME``, ``GIT_<ROLE>_EMAIL`` and ``GIT_<ROLE>_DATE``
    from the environment, then ``user.name``/``user.email`` from config,
    then built-in defaults. Without a date variable the current time in
    UTC is used.

    Args:
        role: 'author' or 'committer'
        config: Config to consult after the environment
        now: Override for the current epoch seconds

    Returns:
        str: Identity string as stored in commit headers
    """
    prefix = f"GIT_{role.upper()}"
    name = os.environ.get(f"{prefix}_NAME")
    email = os.environ.get(f"{prefix}_EMAIL")

    if config and (not name or not email):
        config_name, config_email = config.get_user_identity()
        name = name or config_name
        email = email or config_email

    date = os.environ.get(f"{prefix}_DATE")
    if not date:
        date = f"{int(time.time()) if now is None else now} +0000"

    return f"{name or DEFAULT_NAME} <{email or DEFAULT_EMAIL}> {date}"
