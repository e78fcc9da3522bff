import os
import re

from pydantic import BaseModel, Field, field_validator

_ENV_PREFIX = "README_CHECK_"


class LintSettings(BaseModel):
    documentation_file_name: str = "README.md"
    ancillary_folder_name: str = "doc"
    manifest_file_name: str = "build.properties"
    include_key: str = "bin.includes"
    descriptor_folder_name: str = "ESH-INF"
    header_exception_pattern: str | None = r"^[^\w\s]+$"
    workers: int = Field(default=4, ge=1)

    @field_validator("header_exception_pattern")
    @classmethod
    def _compiles(cls, value: str | None) -> str | None:
        if value:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid header exception pattern {value!r}: {exc}") from None
        return value or None


def get_settings(**overrides: object) -> LintSettings:
    """Build settings from ``README_CHECK_*`` environment variables.

    Keyword arguments that are not ``None`` take precedence over the environment.
    """
    values: dict[str, object] = {}
    env_names = {
        "documentation_file_name": "DOC_FILE",
        "ancillary_folder_name": "DOC_FOLDER",
        "manifest_file_name": "MANIFEST_FILE",
        "include_key": "INCLUDE_KEY",
        "descriptor_folder_name": "DESCRIPTOR_FOLDER",
        "header_exception_pattern": "HEADER_EXCEPTION",
        "workers": "WORKERS",
    }
    for field, suffix in env_names.items():
        env_value = os.getenv(_ENV_PREFIX + suffix)
        if env_value is not None:
            values[field] = env_value
    values.update({key: value for key, value in overrides.items() if value is not None})
    return LintSettings.model_validate(values)
