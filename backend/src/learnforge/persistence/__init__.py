"""Persistence layer - the user directory and its database configuration."""

from learnforge.persistence.adapter import UserDirectory
from learnforge.persistence.config import DatabaseConfig, create_directory
from learnforge.persistence.users import SQLUserDirectory

__all__ = ["UserDirectory", "DatabaseConfig", "SQLUserDirectory", "create_directory"]
