"""
CLI entry point for SubSync with argument parsing and environment variable loading.
"""
import argparse
import codecs
import os
import sys
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pathlib import Path
from dotenv import load_dotenv
from rich.markup import escape
from rich.table import Table

from . import __version__
from .errors import SubSyncError
from .logging import setup_logging
from .matcher import DEFAULT_FALLBACK_PREFIX
from .sync import BatchReport, BatchSynchronizer

EXIT_OK = 0;
EXIT_ERROR = 1;
EXIT_PARTIAL = 2;
EXIT_INTERRUPTED = 130;


def parse_shift_seconds( value: str ) -> int:
    """
    Convert a signed decimal number of seconds to whole milliseconds.

    Rounds half away from zero, so ``-5.43`` gives ``-5430`` and ``0.0005``
    gives ``1``.
    """
    try:
        seconds = Decimal( value.strip() );
    except InvalidOperation:
        raise argparse.ArgumentTypeError( f"invalid shift value: {value!r}" );
    if not seconds.is_finite():
        raise argparse.ArgumentTypeError( f"shift must be a finite number: {value!r}" );
    return int( ( seconds * 1000 ).to_integral_value( rounding=ROUND_HALF_UP ) );


class SubSyncCLI:
    """
    Command line interface for SubSync.

    Flags override environment variables, which may come from a .env file:
    SUBSYNC_PREFIX, SUBSYNC_ENCODING, SUBSYNC_BACKUP_DIR, SUBSYNC_LOG_DIR.
    """

    def __init__( self ):
        self.parser = self._create_parser();
        self.args = None;
        self.logger = None;

    def _create_parser( self ):
        """Create argument parser with all SubSync options."""
        parser = argparse.ArgumentParser(
            prog="subsync",
            description="Shift subtitle timestamps and rename subtitles to match video files by episode number",
            epilog="Example: subsync ./season1 -5.43   (negative = earlier). " \
                   "Environment variables: SUBSYNC_PREFIX, SUBSYNC_ENCODING, SUBSYNC_BACKUP_DIR, SUBSYNC_LOG_DIR"
        );

        parser.add_argument(
            "folder",
            type=Path,
            help="Folder holding the video (.mkv, .mp4, .avi) and subtitle (.srt, .ass) files"
        );

        parser.add_argument(
            "shift",
            type=parse_shift_seconds,
            metavar="SHIFT_SECONDS",
            help="Signed time shift in seconds, e.g. -5.43"
        );

        parser.add_argument(
            "--prefix",
            default=None,
            help=f"Name prefix for subtitles without a matching video (default: {DEFAULT_FALLBACK_PREFIX})"
        );

        parser.add_argument(
            "--encoding",
            default=None,
            help="Text encoding of subtitle files (default: utf-8)"
        );

        parser.add_argument(
            "--keep-originals",
            action="store_true",
            help="Leave the original subtitle files in place"
        );

        parser.add_argument(
            "--no-backup",
            action="store_true",
            help="Do not back up originals before removing them"
        );

        parser.add_argument(
            "--backup-dir",
            type=Path,
            default=None,
            help="Backup directory (default: FOLDER/backup)"
        );

        parser.add_argument(
            "--log-dir",
            type=Path,
            default=None,
            help="Also write a rotating log file to this directory"
        );

        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be written without touching any file"
        );

        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug mode with verbose output"
        );

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        );

        return parser;

    def _load_environment( self ):
        """Load environment variables from .env file and system, filling unset options."""
        env_file = Path( ".env" );
        if env_file.exists():
            load_dotenv( env_file );

        if self.args.prefix is None:
            self.args.prefix = os.getenv( "SUBSYNC_PREFIX", DEFAULT_FALLBACK_PREFIX );
        if self.args.encoding is None:
            self.args.encoding = os.getenv( "SUBSYNC_ENCODING", "utf-8" );
        if self.args.backup_dir is None and os.getenv( "SUBSYNC_BACKUP_DIR" ):
            self.args.backup_dir = Path( os.getenv( "SUBSYNC_BACKUP_DIR" ) );
        if self.args.log_dir is None and os.getenv( "SUBSYNC_LOG_DIR" ):
            self.args.log_dir = Path( os.getenv( "SUBSYNC_LOG_DIR" ) );

    def _validate_arguments( self ):
        """Validate parsed arguments and environment setup."""
        errors = [];

        if not self.args.folder.exists():
            errors.append( f"Folder not found: {self.args.folder}" );
        elif not self.args.folder.is_dir():
            errors.append( f"Not a directory: {self.args.folder}" );

        if not self.args.prefix:
            errors.append( "Fallback prefix must not be empty" );
        elif "/" in self.args.prefix or os.sep in self.args.prefix:
            errors.append( f"Fallback prefix must not contain a path separator: {self.args.prefix!r}" );

        try:
            codecs.lookup( self.args.encoding );
        except LookupError:
            errors.append( f"Unknown encoding: {self.args.encoding}" );

        return errors;

    def parse_args( self, argv=None ):
        """Parse command line arguments and validate configuration."""
        self.args = self.parser.parse_args( argv );

        self._load_environment();

        self.logger = setup_logging( debug=self.args.debug, log_dir=self.args.log_dir );

        errors = self._validate_arguments();
        if errors:
            self.logger.error( "Configuration errors:" );
            for error in errors:
                self.logger.error( f"  - {error}" );
            sys.exit( EXIT_ERROR );

        self.logger.info( f"SubSync v{__version__} starting..." );
        self.logger.info( f"Folder: {self.args.folder}" );
        self.logger.info( f"Time shift: {self.args.shift} ms" );
        self.logger.debug( f"Prefix: {self.args.prefix!r}, encoding: {self.args.encoding}, " \
                           f"keep originals: {self.args.keep_originals}, dry run: {self.args.dry_run}" );

        return self.args;

    def print_report( self, report: BatchReport ):
        """Render a per-file summary table."""
        table = Table( title="SubSync results" );
        table.add_column( "Subtitle" );
        table.add_column( "Output" );
        table.add_column( "Cues", justify="right" );
        table.add_column( "Clamped", justify="right" );
        table.add_column( "Status" );

        for outcome in report.outcomes:
            status = outcome.status;
            if outcome.error:
                status = f"[red]{status}[/red]: {escape( outcome.error )}";
            elif not outcome.matched:
                status = f"{status} (no video)";
            table.add_row(
                escape( outcome.source ),
                escape( outcome.output or "-" ),
                str( outcome.stats.cues ),
                str( outcome.stats.clamped ),
                status
            );

        self.logger.console.print( table );


def main( argv=None ):
    """Main entry point for the SubSync CLI."""
    cli = SubSyncCLI();
    args = cli.parse_args( argv );

    synchronizer = BatchSynchronizer(
        folder=args.folder,
        offset_ms=args.shift,
        fallback_prefix=args.prefix,
        encoding=args.encoding,
        keep_originals=args.keep_originals,
        backup=not args.no_backup,
        backup_dir=args.backup_dir,
        dry_run=args.dry_run,
        debug=args.debug
    );

    try:
        report = synchronizer.run();
    except KeyboardInterrupt:
        cli.logger.warning( "Interrupted by user" );
        sys.exit( EXIT_INTERRUPTED );
    except SubSyncError as e:
        cli.logger.error( str( e ) );
        sys.exit( e.code );

    if report.outcomes:
        cli.print_report( report );
    else:
        cli.logger.warning( "No subtitle files found" );

    sys.exit( EXIT_OK if report.ok else EXIT_PARTIAL );


if __name__ == "__main__":
    main();
