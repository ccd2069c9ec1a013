"""Declarative configuration registry and the built-in org links."""

from lentic_engine.blocks import ConfigurationError

from .defaults import DEFAULT_CONFIGURATIONS, load_default_configurations
from .models import ConfigurationSpec
from .registry import ConfigurationRegistry, RegistryStats

__all__ = [
    "ConfigurationError",
    "ConfigurationRegistry",
    "ConfigurationSpec",
    "DEFAULT_CONFIGURATIONS",
    "RegistryStats",
    "load_default_configurations",
]
