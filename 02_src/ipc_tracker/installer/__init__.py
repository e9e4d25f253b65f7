"""Installer module."""

from .installer import ContextInstaller, IContextInstaller
from .state import InstallationState

__all__ = ["ContextInstaller", "IContextInstaller", "InstallationState"]
