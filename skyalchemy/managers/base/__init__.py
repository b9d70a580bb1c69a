"""Contains the generic bases for the managers used by the application.
These should contain no application-specific functionality."""

from .base_config import BaseConfigManager
