# src/preingest/steps/__init__.py
"""Steps concretos de pré-ingestão."""

from ..core.pipeline.registry import StepRegistry
from .checksum import ContainerChecksumStep
from .settings import SettingsStep
from .unpack import UnpackContainerStep


def default_registry() -> StepRegistry:
    registry = StepRegistry()
    registry.add(SettingsStep.name, SettingsStep)
    registry.add(ContainerChecksumStep.name, ContainerChecksumStep)
    registry.add(UnpackContainerStep.name, UnpackContainerStep)
    return registry


__all__ = ["ContainerChecksumStep", "SettingsStep", "UnpackContainerStep", "default_registry"]
