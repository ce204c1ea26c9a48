"""Entry point to the Mockzure REST API service.

This source file contains entry point to the service. It is implemented in the
main() function.
"""

import logging
import os
from argparse import ArgumentParser

from rich.logging import RichHandler

import constants
from configuration import AppConfig
from log import get_logger, set_log_level
from runners.uvicorn import start_uvicorn

FORMAT = "%(message)s"
logging.basicConfig(
    level="INFO", format=FORMAT, datefmt="[%X]", handlers=[RichHandler()]
)

logger = get_logger(__name__)


def create_argument_parser() -> ArgumentParser:
    """Create and configure argument parser object.

    The parser includes these options:
    - -v / --verbose: enable verbose output
    - -d / --dump-configuration: dump the loaded configuration to JSON and exit
    - -c / --config: path to the configuration file (default taken from the
                     MOCKZURE_CONFIG environment variable, then "mockzure.yaml")
    - --version: print service version and exit

    Returns:
        Configured ArgumentParser for parsing the service CLI options.
    """
    parser = ArgumentParser(prog="mockzure")
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        help="make it verbose",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "-d",
        "--dump-configuration",
        dest="dump_configuration",
        help="dump actual configuration into JSON file and quit",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config_file",
        help="path to configuration file "
        f"(default: ${constants.CONFIGURATION_FILE_ENV_VAR} or "
        f"{constants.DEFAULT_CONFIGURATION_FILE})",
        default=os.environ.get(
            constants.CONFIGURATION_FILE_ENV_VAR,
            constants.DEFAULT_CONFIGURATION_FILE,
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{constants.SERVICE_NAME} v{constants.SERVICE_VERSION}",
    )

    return parser


def main() -> None:
    """Entry point to the web service.

    Parses command-line arguments, loads and validates the configuration,
    and then:
    - If --dump-configuration is provided, writes the active configuration to
      configuration.json and exits (exits with status 1 on failure).
    - Otherwise, stores the configuration path in the environment for worker
      processes and starts the Uvicorn web service.

    Raises:
        SystemExit: when configuration dumping fails (exits with status 1).
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    if args.verbose:
        # worker processes read the level from environment
        os.environ[constants.LOG_LEVEL_ENV_VAR] = "DEBUG"
        set_log_level(logging.DEBUG)

    logger.info("%s startup", constants.SERVICE_NAME)

    app_config = AppConfig()
    app_config.load_configuration(args.config_file)
    logger.debug("Configuration: %s", app_config.configuration)

    # -d or --dump-configuration CLI flags are used to dump the actual configuration
    # to a JSON file w/o doing any other operation
    if args.dump_configuration:
        try:
            app_config.configuration.dump()
            logger.info("Configuration dumped to configuration.json")
        except Exception as e:
            logger.error("Failed to dump configuration: %s", e)
            raise SystemExit(1) from e
        return

    # Store config path in env so each uvicorn worker can load it
    # (step is needed because process context isn't shared).
    os.environ[constants.CONFIGURATION_FILE_ENV_VAR] = args.config_file

    start_uvicorn(app_config.service_configuration)
    logger.info("%s finished", constants.SERVICE_NAME)


if __name__ == "__main__":
    main()
