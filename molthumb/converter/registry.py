"""Converter lookup, capability checks and command construction."""

from __future__ import annotations

import re
import shlex

from molthumb.config.models import ConverterSettings, ConverterSpec
from molthumb.converter.models import ConverterConfigurationError

_PLACEHOLDERS = re.compile(r"\$path/|\$format|\$input|\$output")


class ConverterRegistry:
    """Read-only view over the configured converters."""

    def __init__(self, settings: ConverterSettings) -> None:
        self._settings = settings

    @property
    def active(self) -> str:
        return self._settings.active

    @property
    def tool_dir(self) -> str:
        return self._settings.tool_dir

    @property
    def timeout(self) -> int:
        return self._settings.timeout_seconds

    def names(self) -> list[str]:
        return sorted(self._settings.commands)

    def lookup(self, converter: str | None = None) -> ConverterSpec:
        name = converter or self.active
        try:
            return self._settings.commands[name]
        except KeyError:
            raise ConverterConfigurationError(name) from None

    def is_capable(self, source_format: str, converter: str | None = None) -> bool:
        name = converter or self.active
        spec = self._settings.commands.get(name)
        return spec is not None and source_format in spec.supported_formats

    def require(self, source_format: str, converter: str | None = None) -> ConverterSpec:
        """Return the converter spec, raising if it cannot handle source_format."""
        name = converter or self.active
        if not self.is_capable(source_format, name):
            raise ConverterConfigurationError(name, source_format)
        return self._settings.commands[name]

    def build_command(
        self, spec: ConverterSpec, source_format: str, input_path: str, output_path: str
    ) -> str:
        """Substitute $path/, $format, $input and $output in one pass, shell-quoted."""
        values = {
            "$path/": shlex.quote(f"{self.tool_dir}/") if self.tool_dir else "",
            "$format": shlex.quote(source_format),
            "$input": shlex.quote(input_path),
            "$output": shlex.quote(output_path),
        }
        return _PLACEHOLDERS.sub(lambda m: values[m.group(0)], spec.command)
