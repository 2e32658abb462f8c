"""
Initializes the config package.

The config package is responsible for loading and validating the configuration of
the client under test: its ports, shared JWT secret and timeouts.
"""

# This import is done to facilitate cleaner imports in the project
# `from config import EnvConfig` instead of `from config.env import EnvConfig`
from .env import ClientConfig, EnvConfig

__all__ = ["ClientConfig", "EnvConfig"]
