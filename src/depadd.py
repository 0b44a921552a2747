"""depadd - add JSR and npm dependencies to deno.json or package.json

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from cli_add import run_add
from cli_config import build_add_options
from common.logging_utils import configure_logging, extra_context, is_debug_enabled


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    configure_logging(
        level=getattr(args, "LOG_LEVEL", None),
        logfile=getattr(args, "LOG_FILE", None),
        quiet=bool(getattr(args, "QUIET", False)),
    )

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    options = build_add_options(args)
    exit_code = run_add(options)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="main",
                outcome="success" if exit_code == 0 else "failure",
                exit_code=exit_code,
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
