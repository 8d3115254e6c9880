# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    ApiConfig,
    AppConfig,
    StorageConfig,
    load_config,
    load_config_from_env_file,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "StorageConfig",
    "load_config",
    "load_config_from_env_file",
]
