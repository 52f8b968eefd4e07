"""
OpenCage geocode client - command line entry point.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import lib.utils as utils
from internal.config.manager import ConfigError, ConfigManager
from lib.logging_utils import initLogging
from lib.opencage import (
    API_BASE_URL,
    GeocodeOption,
    InvalidArgumentError,
    MissingCredentialError,
    OpenCageClient,
    OpenCageError,
    QuotaOrAccessError,
)
from lib.opencage.constants import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
# httpx logs full request URLs (with API key) at INFO level
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_QUOTA = 3


def _configuredKey(value: Optional[str]) -> Optional[str]:
    # Unresolved "${VAR}" placeholder means the variable isn't set
    if not value or "${" in value:
        return None
    return value


def createClient(configManager: ConfigManager, apiKey: Optional[str] = None) -> OpenCageClient:
    """Build OpenCageClient from `[opencage]` config section, dood!"""
    config = configManager.getOpenCageConfig()
    try:
        requestTimeout = float(config.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid opencage.timeout value: {config.get('timeout')!r}") from e
    if requestTimeout <= 0:
        raise ConfigError(f"opencage.timeout must be positive, got {requestTimeout}")

    return OpenCageClient(
        apiKey=apiKey or _configuredKey(config.get("api-key")),
        baseUrl=config.get("base-url", API_BASE_URL),
        userAgent=config.get("user-agent", DEFAULT_USER_AGENT),
        requestTimeout=requestTimeout,
        defaultLanguage=config.get("language"),
    )


def parseParam(value: str) -> tuple[str, str]:
    """Parse NAME=VALUE command line parameter."""
    if "=" not in value:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got '{value}'")
    name, paramValue = value.split("=", 1)
    if not name.strip():
        raise argparse.ArgumentTypeError(f"Empty parameter name in '{value}'")
    return name.strip(), paramValue


def _addCommonArguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--language", help="Language for results (e.g. en, de, native)")
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        choices=[option.value for option in GeocodeOption],
        help="Presence-only API switch (can be specified multiple times)",
    )
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        type=parseParam,
        metavar="NAME=VALUE",
        help="Additional raw API parameter (can be specified multiple times), q and key are ignored",
    )


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Forward and reverse geocoding with OpenCage API, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument("--api-key", help="API key (overrides config and OPENCAGE_API_KEY)")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    forwardParser = subparsers.add_parser("forward", help="Address or place name to coordinates")
    forwardParser.add_argument("query", help="Free-form query")
    forwardParser.add_argument("--country", action="append", help="ISO 3166-1 alpha-2 country code")
    forwardParser.add_argument("--limit", type=int, help="Maximum number of results (1-100)")
    forwardParser.add_argument(
        "--bounds", nargs=4, type=float, metavar=("MINLON", "MINLAT", "MAXLON", "MAXLAT"), help="Bounding box hint"
    )
    forwardParser.add_argument("--proximity", nargs=2, type=float, metavar=("LAT", "LON"), help="Bias results to point")
    _addCommonArguments(forwardParser)

    reverseParser = subparsers.add_parser("reverse", help="Coordinates to address")
    reverseParser.add_argument("latitude", type=float)
    reverseParser.add_argument("longitude", type=float)
    _addCommonArguments(reverseParser)

    args = parser.parse_args(argv)
    if not args.print_config and args.command is None:
        parser.error("command is required (forward or reverse)")
    return args


def prettyPrintConfig(configManager: ConfigManager) -> None:
    """Pretty-print the loaded configuration with secrets masked, dood!"""
    apiKey = configManager.getOpenCageConfig().get("api-key")
    print(utils.maskSecrets(utils.jsonDumps(configManager.config, indent=2), [_configuredKey(apiKey)]))


def runCommand(client: OpenCageClient, args) -> Dict[str, Any]:
    """Run forward or reverse geocoding as requested by parsed arguments."""
    extraParams = dict(args.param)
    if args.command == "forward":
        proximity = args.proximity or (None, None)
        return dict(
            client.forward(
                args.query,
                countryCodes=args.country,
                language=args.language,
                limit=args.limit,
                bounds=args.bounds,
                proximityLatitude=proximity[0],
                proximityLongitude=proximity[1],
                options=args.option,
                extraParams=extraParams,
            )
        )
    return dict(
        client.reverse(
            args.latitude,
            args.longitude,
            language=args.language,
            options=args.option,
            extraParams=extraParams,
        )
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        configManager = ConfigManager(configPath=args.config, configDirs=args.config_dir)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    if args.print_config:
        prettyPrintConfig(configManager)
        return EXIT_OK

    initLogging(configManager.getLoggingConfig())

    try:
        client = createClient(configManager, args.api_key)
        result = runCommand(client, args)
    except (InvalidArgumentError, MissingCredentialError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except QuotaOrAccessError as e:
        print(f"Fatal: {e}", file=sys.stderr)
        return EXIT_QUOTA
    except OpenCageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(utils.jsonDumps(result, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
