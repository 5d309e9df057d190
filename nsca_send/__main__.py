import argparse
import sys

from . import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send passive check results to an NSCA daemon")

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to the .env configuration file"
    )
    parser.add_argument("-H", "--host", type=str, help="NSCA daemon host")
    parser.add_argument("-p", "--port", type=int, help="NSCA daemon port")
    parser.add_argument("-s", "--service", type=str, help="Service name to report for")
    parser.add_argument(
        "-l", "--level",
        default="OK",
        help="OK, WARNING, CRITICAL, UNKNOWN or the numeric code (default: OK)"
    )
    parser.add_argument("message", nargs="+", help="Message text (one alert per argument)")

    return parser


def starter():
    args = build_parser().parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    starter()
