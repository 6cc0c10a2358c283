"""Configuration for fwmatrix."""

from fwmatrix.config.settings import MatrixSettings, create_settings


__all__ = ["MatrixSettings", "create_settings"]
