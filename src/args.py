"""Argument parsing functionality for depadd."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depadd",
        description=(
            "depadd - Add JSR and npm dependencies to deno.json or package.json"
        ),
        add_help=True,
    )

    parser.add_argument("packages",
                        metavar="PACKAGE",
                        help="Package to add, e.g. jsr:@std/path, @std/fs@~1.0.0 or npm:chalk@5",
                        nargs="+",
                        type=str)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to the deno.json or deno.jsonc file to update",
                        action="store",
                        type=str)
    parser.add_argument("--cwd",
                        dest="CWD",
                        help="Directory to discover the manifest from (default: current directory)",
                        action="store",
                        type=str)
    parser.add_argument("--unstable-package-json",
                        dest="UNSTABLE_PACKAGE_JSON",
                        help="Allow adding to package.json when no deno.json is present.",
                        action="store_true")
    parser.add_argument("--jsr-url",
                        dest="JSR_URL",
                        help="Base URL of the JSR registry",
                        action="store",
                        type=str)
    parser.add_argument("--npm-registry",
                        dest="NPM_REGISTRY",
                        help="Base URL of the npm registry",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
