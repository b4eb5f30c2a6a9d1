"""
Utilities Module
================

Common utilities shared across the application:
- logger: Leveled, colored logging with context and an optional debug file
- config: Centralized configuration management
"""

from gpt_agent.utils.logger import Logger, logger
from gpt_agent.utils.config import get_config, Config

__all__ = ["Logger", "logger", "get_config", "Config"]
