"""Configuration loading from CLI args, env vars, and an optional YAML file.

Precedence, lowest to highest: defaults <- YAML file <- env vars <- CLI args.
"""

import logging
import os
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

MODE_WORKBOOK = "workbook"
MODE_STATS = "stats"
MODE_WHERE = "where"
MODES = (MODE_WORKBOOK, MODE_STATS, MODE_WHERE)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

YAML_KEYS = ("mode", "output", "workers", "inputs", "sheet_per_table", "log_level")


class ConfigError(ValueError):
    """Invalid or incomplete configuration; reported before any scanning."""


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_workers(value, source: str) -> int:
    try:
        workers = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"{source}: worker count must be an integer, got {value!r}") from None
    if workers < 1:
        raise ConfigError(f"{source}: worker count must be >= 1, got {workers}")
    return workers


@dataclass(frozen=True)
class Config:
    mode: str = MODE_WORKBOOK
    output: str = ""
    workers: int = field(default_factory=lambda: max(1, os.cpu_count() or 1))
    inputs: list[str] = field(default_factory=list)
    sheet_per_table: bool = False
    log_level: str = "INFO"


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns an empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file {path} not found") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from None
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from None
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    unknown = sorted(set(data) - set(YAML_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    logger.info("Loaded YAML config from %s", path)
    return {k: v for k, v in data.items() if k in YAML_KEYS}


def load_config(cli_args, yaml_data: dict | None = None, environ=None) -> Config:
    """Build a validated Config from parsed CLI args, YAML data and env vars.

    ``--workbook PATH`` selects workbook mode and wins over ``--mode``;
    the legacy modes need ``--mode stats|where`` plus ``--out PATH``.
    """
    yaml_data = yaml_data or {}
    environ = os.environ if environ is None else environ
    defaults = Config()

    mode = str(yaml_data.get("mode", defaults.mode)).lower()
    output = yaml_data.get("output", defaults.output) or ""
    workers = defaults.workers
    if "workers" in yaml_data:
        workers = _parse_workers(yaml_data["workers"], "config file")
    inputs = yaml_data.get("inputs", defaults.inputs) or []
    if isinstance(inputs, str):
        inputs = [inputs]
    sheet_per_table = _parse_bool(yaml_data.get("sheet_per_table", defaults.sheet_per_table))
    log_level = str(yaml_data.get("log_level", defaults.log_level))

    if environ.get("ANALYZER_WORKERS"):
        workers = _parse_workers(environ["ANALYZER_WORKERS"], "ANALYZER_WORKERS")
    if environ.get("ANALYZER_LOG_LEVEL"):
        log_level = environ["ANALYZER_LOG_LEVEL"]

    if getattr(cli_args, "workbook", None):
        mode = MODE_WORKBOOK
        output = cli_args.workbook
    else:
        if getattr(cli_args, "mode", None):
            mode = cli_args.mode.lower()
        if getattr(cli_args, "out", None):
            output = cli_args.out
    if getattr(cli_args, "threads", None) is not None:
        workers = _parse_workers(cli_args.threads, "--threads")
    if getattr(cli_args, "inputs", None):
        inputs = list(cli_args.inputs)
    if getattr(cli_args, "sheet_per_table", False):
        sheet_per_table = True
    if getattr(cli_args, "log_level", None):
        log_level = cli_args.log_level

    log_level = log_level.upper()
    if mode not in MODES:
        raise ConfigError(f"Unknown mode {mode!r}; expected one of {', '.join(MODES)}")
    if not output:
        if mode == MODE_WORKBOOK:
            raise ConfigError("No output target: use --workbook PATH or --mode stats|where --out PATH")
        raise ConfigError(f"Mode {mode!r} requires --out PATH")
    if not inputs:
        raise ConfigError("No input files or directories given")
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level {log_level!r}")

    return Config(
        mode=mode,
        output=str(output),
        workers=workers,
        inputs=[str(p) for p in inputs],
        sheet_per_table=sheet_per_table,
        log_level=log_level,
    )
