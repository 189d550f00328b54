"""
Batch controller: scans a folder, matches subtitles to videos, shifts and writes them.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .backup import BackupManager
from .errors import FolderNotFound, SubSyncError, UnreadableFile, UnwritableFile
from .logging import get_logger
from .matcher import DEFAULT_FALLBACK_PREFIX, MatchResult, MediaFile, classify, match_all
from .subtitles import ShiftStats, shift
from .timestamps import dialect_for


@dataclass
class FileOutcome:
    """What happened to one subtitle file."""
    source: str
    output: Optional[str] = None
    matched: bool = False
    status: str = "pending"            # written, planned or failed
    stats: ShiftStats = field( default_factory=ShiftStats )
    error: Optional[str] = None


@dataclass
class BatchReport:
    """Outcome of a whole batch run."""
    videos: int = 0
    outcomes: List[FileOutcome] = field( default_factory=list )

    @property
    def failed( self ) -> List[FileOutcome]:
        return [ outcome for outcome in self.outcomes if outcome.status == "failed" ];

    @property
    def succeeded( self ) -> List[FileOutcome]:
        return [ outcome for outcome in self.outcomes if outcome.status != "failed" ];

    @property
    def ok( self ) -> bool:
        return not self.failed;


class BatchSynchronizer:
    """
    Main controller for a batch run.

    Orchestrates:
    1. Folder scan and classification
    2. Episode matching
    3. Timestamp shifting and writing, one file at a time

    A failure on one file is recorded and the batch moves on; only an
    unreadable folder stops the run.
    """

    def __init__(
        self,
        folder: Path,
        offset_ms: int,
        fallback_prefix: str = DEFAULT_FALLBACK_PREFIX,
        encoding: str = "utf-8",
        keep_originals: bool = False,
        backup: bool = True,
        backup_dir: Optional[Path] = None,
        dry_run: bool = False,
        debug: bool = False
    ):
        self.folder = Path( folder );
        self.offset_ms = offset_ms;
        self.fallback_prefix = fallback_prefix;
        self.encoding = encoding;
        self.keep_originals = keep_originals;
        self.dry_run = dry_run;

        # Output names handed out during this run, written or planned
        self.claimed_names = set();

        self.logger = get_logger( debug=debug );

        self.backup_manager = None;
        if backup and not keep_originals:
            self.backup_manager = BackupManager( Path( backup_dir ) if backup_dir else self.folder / "backup" );

    def list_folder( self ) -> List[str]:
        """List file names in the folder, sorted for a stable enumeration order."""
        if not self.folder.is_dir():
            raise FolderNotFound( self.folder );
        try:
            return sorted( entry.name for entry in self.folder.iterdir() if entry.is_file() );
        except OSError as e:
            raise FolderNotFound( self.folder ) from e;

    def scan( self ) -> Tuple[List[MediaFile], List[MediaFile]]:
        """Scan the folder and split it into videos and subtitles."""
        self.logger.info( "=== STEP 1: FOLDER SCAN ===" );
        self.logger.info( f"Scanning folder: {self.folder}" );

        videos, subtitles = classify( self.list_folder() );

        self.logger.info( f"Found {len( videos )} video files" );
        self.logger.info( f"Found {len( subtitles )} subtitle files" );
        for media in videos + subtitles:
            self.logger.debug( f"{media.role.value}: {media.name} (episode: {media.episode})" );

        return videos, subtitles;

    def read_subtitle( self, name: str ) -> str:
        """
        Read a subtitle file as text with its line endings untouched.

        Raises:
            UnreadableFile: If the file cannot be opened or decoded
        """
        path = self.folder / name;
        try:
            with open( path, "r", encoding=self.encoding, newline="" ) as f:
                return f.read();
        except ( OSError, UnicodeDecodeError ) as e:
            raise UnreadableFile( path, e ) from e;

    def write_subtitle( self, name: str, content: str ) -> Path:
        """
        Write shifted content to a new file; existing files are never replaced.

        Raises:
            UnwritableFile: If the file exists, or cannot be created or encoded
        """
        path = self.folder / name;
        try:
            data = content.encode( self.encoding );
        except UnicodeEncodeError as e:
            raise UnwritableFile( path, e ) from e;

        try:
            with open( path, "xb" ) as f:
                f.write( data );
        except FileExistsError as e:
            raise UnwritableFile( path, "file already exists" ) from e;
        except OSError as e:
            raise UnwritableFile( path, e ) from e;
        return path;

    def resolve_output_name( self, result: MatchResult ) -> str:
        """
        Pick a target name that would not overwrite anything.

        Falls back to the prefixed name when the matched name is taken, is
        the subtitle's own name, or was already given to an earlier file in
        this run. Dry runs see the same names as real ones.

        Raises:
            UnwritableFile: If every candidate name is taken
        """
        candidates = [ result.output_name ];
        fallback = f"{self.fallback_prefix}{result.subtitle.name}";
        if fallback not in candidates:
            candidates.append( fallback );

        for name in candidates:
            if name == result.subtitle.name or name in self.claimed_names or ( self.folder / name ).exists():
                self.logger.debug( f"Output name {name} is taken" );
                continue;
            if name != result.output_name:
                self.logger.warning( f"{result.output_name} is taken, writing {name} instead" );
            return name;

        raise UnwritableFile( self.folder / result.output_name, "all candidate output names are taken" );

    def retire_original( self, name: str ):
        """Back up and remove an original subtitle once its replacement is written."""
        path = self.folder / name;
        if self.backup_manager is not None:
            try:
                self.backup_manager.create_backup( path );
            except OSError as e:
                self.logger.error( f"Backup of {name} failed, keeping original: {e}" );
                return;
        try:
            path.unlink();
        except OSError as e:
            self.logger.warning( f"Could not remove original {name}: {e}" );

    def process( self, result: MatchResult ) -> FileOutcome:
        """Shift one subtitle and write it under its output name."""
        subtitle = result.subtitle;
        outcome = FileOutcome( source=subtitle.name, matched=result.matched );
        self.logger.info( f"Processing: {subtitle.name}" );

        try:
            dialect = dialect_for( subtitle.name );
            content = self.read_subtitle( subtitle.name );
            shifted = shift( content, dialect, self.offset_ms, stats=outcome.stats );
            if outcome.stats.malformed:
                self.logger.warning( f"{subtitle.name}: {outcome.stats.malformed} timing line(s) left unchanged" );

            outcome.output = self.resolve_output_name( result );
            self.claimed_names.add( outcome.output );
            if self.dry_run:
                outcome.status = "planned";
                self.logger.info( f"  [dry-run] would write {outcome.output}" );
                return outcome;

            self.write_subtitle( outcome.output, shifted );
            outcome.status = "written";
        except SubSyncError as e:
            outcome.status = "failed";
            outcome.error = str( e );
            self.logger.error( f"  Failed: {e}" );
            return outcome;

        if result.matched:
            self.logger.info( f"  Shifted and renamed to: {outcome.output}" );
        else:
            self.logger.info( f"  Shifted (no matching video found): {outcome.output}" );

        if not self.keep_originals:
            self.retire_original( subtitle.name );

        return outcome;

    def run( self ) -> BatchReport:
        """
        Run the whole batch.

        Returns:
            BatchReport with one FileOutcome per subtitle

        Raises:
            FolderNotFound: If the folder cannot be listed
        """
        self.claimed_names.clear();
        videos, subtitles = self.scan();

        self.logger.info( "=== STEP 2: EPISODE MATCHING ===" );
        results = match_all( videos, subtitles, self.fallback_prefix );
        matched = sum( 1 for result in results if result.matched );
        self.logger.info( f"Matched {matched}/{len( results )} subtitles to videos" );

        self.logger.info( "=== STEP 3: SHIFT AND WRITE ===" );
        self.logger.info( f"Time shift: {self.offset_ms} ms" );
        report = BatchReport( videos=len( videos ) );
        for result in results:
            report.outcomes.append( self.process( result ) );

        if report.ok:
            self.logger.info( f"All done: {len( report.succeeded )} subtitle file(s) processed" );
        else:
            self.logger.warning( f"Finished with {len( report.failed )} failed file(s) out of {len( report.outcomes )}" );

        return report;
