"""Key-value configuration stores with change notifications."""

from auditlog.core.settings_store.base import (
    ConfigurationChange,
    ConfigurationListener,
    ConfigurationStore,
    NotifyingStore,
)
from auditlog.core.settings_store.memory import InMemoryConfigurationStore
from auditlog.core.settings_store.models import GlobalSetting
from auditlog.core.settings_store.sql import SqlConfigurationStore


__all__ = [
    "ConfigurationChange",
    "ConfigurationListener",
    "ConfigurationStore",
    "GlobalSetting",
    "InMemoryConfigurationStore",
    "NotifyingStore",
    "SqlConfigurationStore",
]
