"""Error reporting and exit codes for the movetree command line."""

import sys
import traceback
from typing import Optional, Sequence

from movetree.models.move_model import PgnMoveFormatError
from movetree.services.logging_service import LoggingService
from movetree.services.move_engine_service import InvalidMoveError
from movetree.services.move_tree_builder import BuildError


EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


class ErrorHandler:
    """Turns movetree failures into stderr reports and process exit codes.

    Input problems (unreadable files, malformed movetext, illegal moves) are
    reported as one line. Anything else is treated as a bug and reported
    with its traceback.
    """

    @staticmethod
    def describe_error(error: BaseException) -> str:
        """Return a one-line, user-facing description of an error."""
        if isinstance(error, InvalidMoveError):
            return f"Illegal move: {error}"
        if isinstance(error, PgnMoveFormatError):
            return f"Malformed move record: {error}"
        if isinstance(error, OSError):
            if error.filename:
                return f"Cannot read {error.filename}: {error.strerror or error}"
            return f"Cannot read input: {error}"
        if isinstance(error, ValueError):
            return f"Invalid input: {error}"
        return f"{type(error).__name__}: {error}"

    @staticmethod
    def is_input_error(error: BaseException) -> bool:
        """Return True for errors caused by the user's input rather than by movetree."""
        return isinstance(error, (OSError, ValueError))

    @staticmethod
    def handle_fatal_error(error: BaseException, context: Optional[str] = None) -> None:
        """Report a fatal error on stderr and exit with EXIT_FATAL.

        Args:
            error: The exception that occurred.
            context: Optional description of what was being done.
        """
        prefix = f"movetree: {context}: " if context else "movetree: "
        print(prefix + ErrorHandler.describe_error(error), file=sys.stderr)

        if not ErrorHandler.is_input_error(error):
            print("Traceback:", file=sys.stderr)
            traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)

        sys.exit(EXIT_FATAL)

    @staticmethod
    def report_build_errors(errors: Sequence[BuildError],
                            logging_service: Optional[LoggingService] = None) -> int:
        """Report lines that were dropped while building the move tree.

        Args:
            errors: Build errors collected by the History.
            logging_service: Logging service to record each error with.

        Returns:
            EXIT_PARTIAL if any line was dropped, otherwise EXIT_OK.
        """
        if not errors:
            return EXIT_OK

        for error in errors:
            message = f"Ply {error.ply} ({error.notation}): {error.message}"
            if logging_service is not None:
                logging_service.error(message)

        noun = "line" if len(errors) == 1 else "lines"
        print(f"movetree: {len(errors)} {noun} dropped, output is partial", file=sys.stderr)
        return EXIT_PARTIAL

    @staticmethod
    def setup_exception_handler() -> None:
        """Install a global exception handler for uncaught exceptions."""
        def exception_handler(exc_type, exc_value, exc_traceback):
            if issubclass(exc_type, KeyboardInterrupt):
                print("\nInterrupted by user.", file=sys.stderr)
                sys.exit(EXIT_INTERRUPTED)

            error = exc_value if exc_value else exc_type()
            ErrorHandler.handle_fatal_error(error, "uncaught exception")

        sys.excepthook = exception_handler
