"""Shared model base classes."""

from fwmatrix.models.base import FwMatrixBaseModel


__all__ = ["FwMatrixBaseModel"]
