"""
Configuration subsystem for GuildStay.

Static, environment-driven configuration with bounds checking.
"""

from guildstay.core.config.config import Config, Environment

__all__ = ["Config", "Environment"]
