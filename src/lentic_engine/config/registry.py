"""Registry of named configuration initializers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from lentic_engine.blocks import BlockDirection, ConfigurationError
from lentic_engine.buffer import TextContainer, container_label
from lentic_engine.link import Configuration
from lentic_engine.runtime.telemetry import span

from .models import ConfigurationSpec


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    spec_count: int
    directions: tuple[str, ...]
    extensions: tuple[str, ...]


class ConfigurationRegistry:
    """Owns named specs and turns them into configurations on demand.

    Hosts keep one registry per session and pass it around explicitly;
    nothing here is process-wide.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._specs: Dict[str, ConfigurationSpec] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def get(self, name: str) -> ConfigurationSpec:
        try:
            return self._specs[name]
        except KeyError as exc:
            raise KeyError(f"Configuration '{name}' is not registered") from exc

    def register(
        self, spec: ConfigurationSpec, *, replace: bool = False
    ) -> ConfigurationSpec:
        with span(
            "config::register",
            logger_name=self._logger_name,
            component="config",
            metadata={"spec": spec.name, "direction": spec.direction.value},
        ):
            if not replace and spec.name in self._specs:
                raise ValueError(f"Configuration '{spec.name}' already registered")
            self._specs[spec.name] = spec
            self._touch()
            return spec

    def unregister(self, name: str) -> Optional[ConfigurationSpec]:
        spec = self._specs.pop(name, None)
        if spec is not None:
            self._touch()
        return spec

    def iter_specs(
        self,
        *,
        direction: BlockDirection | str | None = None,
        extension: Optional[str] = None,
    ) -> Iterator[ConfigurationSpec]:
        wanted = BlockDirection(direction) if direction is not None else None
        for spec in self._specs.values():
            if wanted is not None and spec.direction is not wanted:
                continue
            if extension is not None and spec.extension != extension:
                continue
            yield spec

    def inverse_of(self, name: str) -> ConfigurationSpec:
        """Return the registered counterpart of ``name``.

        Raises ``KeyError`` when either side is missing and
        ``ConfigurationError`` when the pair are not structural opposites.
        """

        spec = self.get(name)
        if spec.inverse is None:
            raise KeyError(f"Configuration '{name}' declares no inverse")
        counterpart = self.get(spec.inverse)
        if not counterpart.is_inverse_of(spec):
            raise ConfigurationError(
                f"Configuration '{spec.inverse}' is not the inverse of '{name}'",
                field="inverse",
            )
        return counterpart

    def initialize(
        self,
        name: str,
        this: TextContainer,
        linked_path: Optional[str] = None,
        *,
        that: Optional[TextContainer] = None,
    ) -> Configuration:
        with span(
            "config::initialize",
            logger_name=self._logger_name,
            component="config",
            metadata={"spec": name, "this": container_label(this)},
        ) as handle:
            spec = self.get(name)
            configuration = spec.initialize(this, linked_path, that=that)
            handle.add_metadata("that", container_label(configuration.target))
            return configuration

    def stats(self) -> RegistryStats:
        specs = self._specs.values()
        return RegistryStats(
            spec_count=len(self._specs),
            directions=tuple(sorted({spec.direction.value for spec in specs})),
            extensions=tuple(
                sorted({spec.extension for spec in specs if spec.extension})
            ),
        )

    def _touch(self) -> None:
        self._revision += 1


__all__ = ["ConfigurationRegistry", "RegistryStats"]
