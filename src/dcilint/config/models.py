"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DCILINT__SECTION__KEY)
3. Project YAML (.dcilint.yaml)
4. Global YAML (~/.config/dcilint/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DCILINT__<SECTION>__<KEY>=<VALUE>

Examples:
    DCILINT__LOGGING__LEVEL=DEBUG
    DCILINT__DCI__ROLE_FORMAT='^[a-z]+$'
    DCILINT__DCI__LIST_ROLE_INTERFACES=true
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from dcilint.config.constants import DEFAULT_ROLE_FORMAT, DEFAULT_ROLE_METHOD_FORMAT

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DCILINT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every Context the builder opens.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DciConfig(BaseModel):
    """Convention checker configuration.

    Env vars:
        DCILINT__DCI__ROLE_FORMAT: Regex a Role field name must match
        DCILINT__DCI__ROLE_METHOD_FORMAT: Regex splitting a method name into role + method
        DCILINT__DCI__LIST_CALLS_IN_ROLE_METHOD: Method whose outgoing calls are listed
        DCILINT__DCI__LIST_CALLS_TO_ROLE_METHOD: RoleMethod whose call sites are listed
        DCILINT__DCI__LIST_ROLE_INTERFACES: List contract calls per Role
        DCILINT__DCI__VIS_DATA_DIR: Directory for exported Context graphs
    """

    role_format: str = Field(
        default=DEFAULT_ROLE_FORMAT,
        description="Fields matching this pattern are Roles.",
    )
    role_method_format: str = Field(
        default=DEFAULT_ROLE_METHOD_FORMAT,
        description="Methods matching this pattern are RoleMethods. "
        "Group 1 is the Role name, group 2 the method name.",
    )
    list_calls_in_role_method: str | None = Field(
        default=None,
        description="Method name whose outgoing RoleMethod calls are reported.",
    )
    list_calls_to_role_method: str | None = Field(
        default=None,
        description="RoleMethod name whose incoming call sites are reported, with a count.",
    )
    list_role_interfaces: bool = Field(
        default=False,
        description="Report, per Role, the contract calls made on its player.",
    )
    vis_data_dir: str | None = Field(
        default=None,
        description="Export each checked Context as <ContextName>.json here. "
        "Existing files are overwritten.",
    )

    @field_validator("role_format")
    @classmethod
    def validate_role_format(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex: {e}") from e
        return v

    @field_validator("role_method_format")
    @classmethod
    def validate_role_method_format(cls, v: str) -> str:
        try:
            pattern = re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex: {e}") from e
        if pattern.groups != 2:
            raise ValueError(f"Pattern must have exactly 2 groups, got {pattern.groups}")
        return v


class DciLintConfig(BaseModel):
    """Root configuration for dcilint."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    dci: DciConfig = Field(default_factory=DciConfig)
