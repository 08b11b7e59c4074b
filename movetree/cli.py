"""Command line entry point: normalize PGN movetext through the move tree."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from movetree.config.config_loader import ConfigLoader
from movetree.services.error_handler import EXIT_FATAL, EXIT_OK, EXIT_PARTIAL, ErrorHandler
from movetree.services.logging_service import LoggingService
from movetree.services.pgn_service import PgnService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="movetree",
        description="Rebuild PGN movetext as a move tree and print it in canonical form.",
    )
    parser.add_argument("pgn", nargs="?", help="PGN file to read (default: stdin)")
    parser.add_argument("--fen", help="Setup position the movetext starts from")
    parser.add_argument("--lenient", action="store_true", default=None,
                        help="Accept non-standard SAN (e.g. Ng1f3, e2e4)")
    parser.add_argument("--no-comments", action="store_true", help="Omit comments and diagram annotations")
    parser.add_argument("--no-nags", action="store_true", help="Omit numeric annotation glyphs")
    parser.add_argument("--config", help="JSON file overriding the default configuration")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the movetree command line tool.

    Returns:
        EXIT_OK, or EXIT_PARTIAL if some lines could not be built.
    """
    ErrorHandler.setup_exception_handler()
    args = build_parser().parse_args(argv)
    logging_service = None

    try:
        config = ConfigLoader(args.config).load()
        logging_service = LoggingService.get_instance(config)

        if args.pgn:
            movetext = Path(args.pgn).read_text(encoding="utf-8")
        else:
            movetext = sys.stdin.read()

        lenient = args.lenient if args.lenient is not None else config["engine"].get("lenient", False)
        history = PgnService.load_history(movetext, setup_fen=args.fen, lenient=lenient)

        render_config = config["render"]
        print(history.render(
            render_comments=render_config.get("include_comments", True) and not args.no_comments,
            render_nags=render_config.get("include_nags", True) and not args.no_nags,
        ))

        return ErrorHandler.report_build_errors(history.build_errors, logging_service)
    except (OSError, ValueError) as e:
        ErrorHandler.handle_fatal_error(e)
        return EXIT_FATAL
    finally:
        if logging_service is not None:
            logging_service.shutdown()


if __name__ == "__main__":
    sys.exit(main())
