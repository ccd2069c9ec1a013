"""Telemetry for the transformation engine, built directly on telelog.

The rest of the package only touches four names:

``configure(...)`` -- adopt an explicit telelog config or a named preset
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- profile a block and optionally track it as a component

Logging knobs are read from ``LENTIC_ENGINE_*`` environment variables into a
:class:`TelemetrySettings`, which is the only place a ``telelog.Config`` is
assembled.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import (
    Any,
    Dict,
    Iterator,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    cast,
)

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "LENTIC_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "lentic_engine")

PRESETS = ("development", "production", "performance")
_TRUTHY = frozenset({"1", "true", "yes", "on"})

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Plain description of how loggers should behave."""

    level: str = "INFO"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048
    profiling: bool = True

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "TelemetrySettings":
        env = os.environ if environ is None else environ

        def read(name: str) -> Optional[str]:
            return env.get(f"{ENV_PREFIX}{name}")

        def flag(name: str, default: bool) -> bool:
            raw = read(name)
            if raw is None:
                return default
            return raw.strip().lower() in _TRUTHY

        size = read("LOG_BUFFER_SIZE")
        return cls(
            level=(read("LOG_LEVEL") or "INFO").upper(),
            console=not flag("DISABLE_CONSOLE", False),
            color=not flag("NO_COLOR", False),
            json=flag("LOG_JSON", False),
            log_file=read("LOG_FILE") or "",
            buffered=flag("LOG_BUFFERED", False),
            buffer_size=int(size) if size else 2048,
            profiling=flag("PROFILE", True),
        )

    def build(self) -> Any:
        """Translate into a ``telelog.Config``."""

        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(self.profiling)
        return config


def preset_settings(
    preset: str, environ: Optional[Mapping[str, str]] = None
) -> TelemetrySettings:
    """Settings for a named preset; ``LOG_FILE`` still overrides the file."""

    base = TelemetrySettings.from_env(environ)
    key = preset.lower()
    if key == "development":
        return TelemetrySettings(level="DEBUG", log_file=base.log_file)
    if key == "production":
        return TelemetrySettings(
            console=False,
            log_file=base.log_file or "lentic_engine.log",
            buffered=True,
            buffer_size=base.buffer_size,
        )
    if key == "performance":
        return replace(
            preset_settings("production", environ),
            level="DEBUG",
            json=True,
            log_file=base.log_file or "lentic_engine-performance.log",
        )
    raise ValueError(
        f"Unknown preset '{preset}', expected one of {', '.join(PRESETS)}."
    )


def configure(
    *, config: Optional[Any] = None, preset: Optional[str] = None
) -> Any:
    """Replace the active telelog configuration and drop cached loggers.

    ``config`` is adopted as-is; ``preset`` names one of :data:`PRESETS`;
    with neither, settings come from the environment. Returns the config now
    in effect.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = preset_settings(preset).build()
    elif config is None:
        config = TelemetrySettings.from_env().build()

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()
    return config


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for the engine."""

    if _ACTIVE_CONFIG is None:
        configure()
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _level_method(logger: Any, level: Any) -> Tuple[Any, bool]:
    name = str(level).lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        return with_data, True

    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    method, accepts_data = _level_method(logger, level)
    if accepts_data:
        pairs = [(str(key), _stringify(value)) for key, value in payload.items()]
        method(message, pairs)
    else:
        method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for attaching metadata mid-flight."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        if self.component_name:
            payload["component"] = self.component_name
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block of work and, optionally, track it as a component.

    ``metadata`` is pushed as logger context for the duration of the block,
    so nested spans must use distinct keys.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    serialized = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=cast(Optional[str], component_name),
        metadata=dict(serialized),
    )

    with ExitStack() as stack:
        for key, value in serialized.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if handle.component_name:
            stack.enter_context(log.track_component(handle.component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
]
