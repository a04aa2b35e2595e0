from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Literal


class ConverterSpec(BaseModel):
    """One external CTF→SVG converter: command template, formats, memory ceiling."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(min_length=1)
    supported_formats: list[str] = Field(min_length=1)
    memory_kib: int = Field(default=307200, gt=0)


def _default_commands() -> dict[str, ConverterSpec]:
    # babel cannot convert reactions yet
    return {
        "babel": ConverterSpec(
            command="$path/babel -i$format $input $output",
            supported_formats=["mol"],
        ),
        "indigo": ConverterSpec(
            command="$path/indigo-depict $input $output",
            supported_formats=["mol", "rxn"],
        ),
    }


class ConverterSettings(BaseModel):
    active: str = "indigo"
    tool_dir: str = "/usr/bin"
    timeout_seconds: int = Field(default=60, gt=0)
    commands: dict[str, ConverterSpec] = Field(default_factory=_default_commands)

    @model_validator(mode="after")
    def _active_is_configured(self) -> "ConverterSettings":
        if self.active not in self.commands:
            known = ", ".join(sorted(self.commands)) or "none"
            raise ValueError(
                f"active converter '{self.active}' is not configured (known: {known})"
            )
        return self


class CacheSettings(BaseModel):
    enabled: bool = True
    prefix: str = Field(default="molhandler-", min_length=1)


class RepositorySettings(BaseModel):
    root: str = ".molthumb"


class ThumbnailSettings(BaseModel):
    default_width: int = Field(default=220, gt=0)


class MolThumbConfig(BaseModel):
    converter: ConverterSettings = Field(default_factory=ConverterSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    repository: RepositorySettings = Field(default_factory=RepositorySettings)
    thumbnail: ThumbnailSettings = Field(default_factory=ThumbnailSettings)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
