"""Configuration management for class schema construction.

This module handles environment-based configuration using Pydantic Settings.
Naming conventions that the schema builder treats specially (reserved
injection names, action and inject method names, repository naming) live
here so hosts can adapt them without touching the builder.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReflectionSettings(BaseSettings):
    """Class schema configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CLASSSCHEMA_",
        case_sensitive=False,
        frozen=True,
    )

    # Method conventions
    constructor_name: str = Field(
        default="__init__", description="Name of the constructor method"
    )
    action_suffix: str = Field(
        default="_action", description="Suffix marking controller action methods"
    )
    inject_prefix: str = Field(
        default="inject", description="Prefix marking dependency injection setters"
    )
    settings_injector_name: str = Field(
        default="inject_settings",
        description="Reserved method name never treated as an inject setter",
    )
    settings_property_name: str = Field(
        default="settings",
        description="Reserved property name never treated as an inject property",
    )

    # Repository naming
    model_module_segment: str = Field(
        default="model", description="Module segment holding domain models"
    )
    repository_module_segment: str = Field(
        default="repository", description="Module segment holding repositories"
    )
    repository_suffix: str = Field(
        default="Repository", description="Suffix of repository class names"
    )

    # Validators
    validator_namespaces: list[str] = Field(
        default=["classschema.validation.validators"],
        description="Modules searched for validators referenced by short name",
    )

    # Cache
    cache_max_entries: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of cached types (None keeps every entry)",
    )

    # Logging
    environment: str = Field(default="development", description="Environment")
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")


# Global configuration instance
settings = ReflectionSettings()
