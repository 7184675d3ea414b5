# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Server configuration.
Configuration is built once at process start from defaults, an optional YAML
file, environment variables and command line flags (in increasing order of
precedence). The resulting ServerConfig is frozen and passed explicitly to
every component.
"""

# Standard
import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Tuple

# Third-Party
from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError
import yaml

# First-Party
from mcp_qr_generator.models import ErrorCorrectionLevel, OutputFormat
from mcp_qr_generator.utils.file_utils import convert_to_bytes

logger = logging.getLogger(__name__)

DEFAULT_PORT = 9999
DEFAULT_HOST = "localhost"
CONFIG_PATH_ENV = "QR_GENERATOR_CONFIG"

# environment variable -> ServerConfig field
ENV_VARS = {
    "HOST": "host",
    "MAX_CONCURRENT_REQUESTS": "max_concurrent_requests",
    "DEFAULT_ERROR_CORRECTION_LEVEL": "default_error_correction_level",
    "DEFAULT_FORMAT": "default_format",
    "DEFAULT_SIZE": "default_size",
    "DEFAULT_MARGIN": "default_margin",
    "DEFAULT_COLOR": "default_color",
    "DEFAULT_BACKGROUND_COLOR": "default_background_color",
    "MAX_QR_CODE_SIZE": "max_qr_code_size",
    "ENABLE_LOGGING": "enable_logging",
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "ALLOWED_DOMAINS": "allowed_domains",
    "DISALLOWED_DOMAINS": "disallowed_domains",
    "MAX_LOGO_SIZE": "max_logo_size",
    "LOGO_FETCH_TIMEOUT": "logo_fetch_timeout",
}

# argparse dest -> ServerConfig field
ARG_FIELDS = {
    "host": "host",
    "port": "port",
    "error_correction_level": "default_error_correction_level",
    "format": "default_format",
    "size": "default_size",
    "margin": "default_margin",
    "color": "default_color",
    "background_color": "default_background_color",
    "log_level": "log_level",
    "log_file": "log_file",
}


class ServerConfig(BaseModel):
    """Process-wide, read-only server configuration.

    ``allowed_domains`` of None permits every logo domain except those in
    ``disallowed_domains``; a tuple is an allow-list and the deny-list still applies.
    """

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    max_concurrent_requests: int = Field(default=10, ge=1)
    default_error_correction_level: ErrorCorrectionLevel = ErrorCorrectionLevel.M
    default_format: OutputFormat = OutputFormat.PNG
    default_size: int = Field(default=300, ge=1)
    default_margin: int = Field(default=4, ge=0)
    default_color: str = "#000000"
    default_background_color: str = "#ffffff"
    max_qr_code_size: int = Field(default=1000, ge=1)
    enable_logging: bool = True
    log_level: Literal["debug", "info", "warning", "error"] = "info"
    log_file: Optional[str] = None
    allowed_domains: Optional[Tuple[str, ...]] = None
    disallowed_domains: Tuple[str, ...] = ()
    max_logo_size: int = Field(default=1024 * 1024, ge=1)
    logo_fetch_timeout: float = Field(default=10.0, gt=0)

    @field_validator("default_error_correction_level", mode="before")
    @classmethod
    def normalize_error_correction(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("default_format", mode="before")
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return "warning" if v == "warn" else v
        return v

    @field_validator("allowed_domains", "disallowed_domains", mode="before")
    @classmethod
    def split_domains(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(d.strip().lower() for d in v.split(",") if d.strip())
        return v

    @field_validator("max_logo_size", mode="before")
    @classmethod
    def parse_byte_size(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip().isdigit():
            return convert_to_bytes(v)
        return v


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the command line parser.

    Returns:
        argparse.ArgumentParser: Parser for server and one-shot generation flags.
    """
    parser = argparse.ArgumentParser(prog="mcp-qr-generator", description="QR code generator served as JSON-RPC tools over HTTP")
    parser.add_argument("--config", help=f"YAML configuration file (or ${CONFIG_PATH_ENV})")
    parser.add_argument("--host", help="HTTP bind host")
    parser.add_argument("--port", type=int, help="HTTP bind port")
    parser.add_argument("--error-correction-level", choices=[e.value for e in ErrorCorrectionLevel], help="Default error correction level")
    parser.add_argument("--format", choices=[f.value for f in OutputFormat], help="Default output format")
    parser.add_argument("--size", type=int, help="Default size in pixels")
    parser.add_argument("--margin", type=int, help="Default margin in modules")
    parser.add_argument("--color", help="Default dark module color")
    parser.add_argument("--background-color", help="Default light module color")
    parser.add_argument("--log-level", choices=["debug", "info", "warn", "warning", "error"], help="Log level")
    parser.add_argument("--log-file", help="Write JSON logs to this file")
    parser.add_argument("--text", help="Generate a single QR code for this text and exit")
    parser.add_argument("--logo", help="Logo URL, data URI or path (with --text)")
    parser.add_argument("--logo-size", type=float, help="Logo size as a percentage 1-100 (with --text)")
    parser.add_argument("--output", help="Write the generated QR code here instead of stdout (with --text)")
    return parser


def parse_command_line_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].

    Returns:
        argparse.Namespace: Parsed arguments.

    Examples:
        >>> args = parse_command_line_args(["--size", "200", "--format", "svg"])
        >>> (args.size, args.format, args.text)
        (200, 'svg', None)
    """
    return build_arg_parser().parse_args(argv)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.info("No config at %s; using defaults", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to read YAML config %s: %s", path, e)
        raise
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.info("Loaded configuration from %s", path)
    return raw


def _from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    port = env.get("PORT")
    if port:
        try:
            parsed = int(port, 10)
            if not 1 <= parsed <= 65535:
                raise ValueError
            values["port"] = parsed
        except ValueError:
            logger.error("Invalid port number: %s. Port must be between 1 and 65535. Using default port %d instead.", port, DEFAULT_PORT)

    for name, field in ENV_VARS.items():
        if env.get(name):
            values[field] = env[name]
    return values


def _from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return {field: getattr(args, dest) for dest, field in ARG_FIELDS.items() if getattr(args, dest, None) is not None}


def load_config(args: Optional[argparse.Namespace] = None, env: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Load configuration from a YAML file, environment variables and command line args.

    Args:
        args: Parsed command line arguments, if any.
        env: Environment mapping. Defaults to os.environ.

    Returns:
        ServerConfig: Frozen configuration.

    Raises:
        ValidationError: If a configured value is invalid.

    Examples:
        >>> load_config(env={}).port
        9999
        >>> load_config(env={"ALLOWED_DOMAINS": "a.com, b.com"}).allowed_domains
        ('a.com', 'b.com')
        >>> load_config(env={"PORT": "99999"}).port
        9999
    """
    env = os.environ if env is None else env
    raw: Dict[str, Any] = {}

    config_path = getattr(args, "config", None) or env.get(CONFIG_PATH_ENV)
    if config_path:
        raw.update(_read_yaml(Path(config_path).expanduser()))
    raw.update(_from_env(env))
    if args is not None:
        raw.update(_from_args(args))

    try:
        return ServerConfig(**raw)
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise
