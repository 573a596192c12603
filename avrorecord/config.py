from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


ENV_PREFIX = "AVRORECORD_"


@dataclass(frozen=True)
class DecoderConfig:
    """Limits and knobs for the decoders.

    ``max_string_length`` and ``max_block_size`` bound how many bytes a single
    length prefix may announce; a corrupted prefix beyond them is reported as
    invalid instead of stalling a live stream while it waits for data that
    will never come. ``chunk_size`` is the read size used by the byte sources.
    """

    max_string_length: int = 16 * 1024 * 1024
    max_block_size: int = 64 * 1024 * 1024
    chunk_size: int = 64 * 1024
    log_level: str = "WARNING"


DEFAULT_CONFIG = DecoderConfig()


def _coerce(name: str, raw: Any, current: Any) -> Any:
    if isinstance(current, int):
        value = int(raw)
        if value <= 0:
            raise ValueError(f"{name} must be positive")
        return value
    value = str(raw).upper()
    if name == "log_level" and not isinstance(logging.getLevelName(value), int):
        raise ValueError(f"unknown log level {raw!r}")
    return value


def _apply(base: DecoderConfig, values: Dict[str, Any], source: str) -> DecoderConfig:
    changes: Dict[str, Any] = {}
    for f in fields(DecoderConfig):
        if f.name not in values or values[f.name] is None:
            continue
        try:
            changes[f.name] = _coerce(f.name, values[f.name], getattr(base, f.name))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s from %s: %r", f.name, source, values[f.name])
    return replace(base, **changes)


def load_config(path: Optional[str | os.PathLike] = None, *, environ: Optional[Dict[str, str]] = None) -> DecoderConfig:
    """Build a config from defaults, an optional JSON file, then environment variables.

    Environment variables win over the file. Variables are the upper-cased
    field names with the ``AVRORECORD_`` prefix, e.g.
    ``AVRORECORD_MAX_STRING_LENGTH``.
    """
    config = DEFAULT_CONFIG

    if path is not None:
        p = Path(path)
        if p.exists():
            try:
                data = json.loads(p.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                logger.exception("[Config] Failed to load %s", p)
            else:
                if isinstance(data, dict):
                    config = _apply(config, data, str(p))
                else:
                    logger.warning("[Config] %s does not contain a JSON object", p)

    env = os.environ if environ is None else environ
    from_env = {
        f.name: env[ENV_PREFIX + f.name.upper()]
        for f in fields(DecoderConfig)
        if ENV_PREFIX + f.name.upper() in env
    }
    return _apply(config, from_env, "environment")


def configure_logging(config: DecoderConfig = DEFAULT_CONFIG) -> None:
    """Set the package logger level. Handlers are left to the application."""
    logging.getLogger("avrorecord").setLevel(config.log_level)


__all__ = ["DEFAULT_CONFIG", "DecoderConfig", "configure_logging", "load_config"]
