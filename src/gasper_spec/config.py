"""
Global configuration for the Gasper specification.

Environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_GASPER_ENVS: list[str] = ["prod", "test"]

GASPER_ENV = os.environ.get("GASPER_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Selects the mainnet or minimal chain preset."""

if GASPER_ENV not in _SUPPORTED_GASPER_ENVS:
    raise ValueError(
        f"Invalid GASPER_ENV environment variable: '{GASPER_ENV}'. "
        f"Supported values: {_SUPPORTED_GASPER_ENVS}"
    )
