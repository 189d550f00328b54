"""
Backup utility with file retention based on file size.
"""
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from .logging import get_logger

BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S";


class BackupManager:
    """
    Keeps timestamped copies of subtitle files before they are removed.

    Rules:
    - Files <150KB: Keep up to 50 copies
    - Files ≥150KB: Keep up to 25 copies
    - ISO-8601 timestamped copies, oldest removed first
    """

    def __init__( self, backup_dir: Path ):
        self.logger = get_logger();
        self.backup_dir = Path( backup_dir );

        # Size thresholds in bytes
        self.size_threshold = 150 * 1024;  # 150KB
        self.max_small_files = 50;         # <150KB files
        self.max_large_files = 25;         # ≥150KB files

    def get_backup_filename( self, original_file: Path ) -> str:
        """
        Generate backup filename with ISO-8601 timestamp.

        Args:
            original_file: Path to original file

        Returns:
            Backup filename with timestamp, e.g. ``episode.2026-10-17T12-30-00.srt``;
            a ``_1``, ``_2`` ... counter is added when that second is already taken
        """
        timestamp = datetime.now().strftime( BACKUP_TIMESTAMP_FORMAT );
        filename = f"{original_file.stem}.{timestamp}{original_file.suffix}";
        counter = 0;
        while ( self.backup_dir / filename ).exists():
            counter += 1;
            filename = f"{original_file.stem}.{timestamp}_{counter}{original_file.suffix}";
        return filename;

    def get_existing_backups( self, original_file: Path ) -> List[Tuple[Path, datetime, int]]:
        """
        Get list of existing backup files for the original file.

        Args:
            original_file: Path to original file

        Returns:
            List of (backup_path, timestamp, size_bytes) tuples, oldest first
        """
        if not self.backup_dir.is_dir():
            return [];

        backup_pattern = re.compile(
            re.escape( original_file.stem ) +
            r"\.(\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2})(?:_(\d+))?" +
            re.escape( original_file.suffix )
        );

        backup_info = [];
        for backup_path in self.backup_dir.iterdir():
            match = backup_pattern.fullmatch( backup_path.name );
            if not match:
                continue;
            try:
                timestamp = datetime.strptime( match.group( 1 ), BACKUP_TIMESTAMP_FORMAT );
                size_bytes = backup_path.stat().st_size;
                backup_info.append( ( backup_path, timestamp, size_bytes, int( match.group( 2 ) or 0 ) ) );
            except ( ValueError, OSError ) as e:
                self.logger.debug( f"Skipping malformed backup file {backup_path}: {e}" );

        # Oldest first; the counter orders copies made within the same second
        backup_info.sort( key=lambda x: ( x[1], x[3], x[0].name ) );

        return [ ( path, timestamp, size_bytes ) for path, timestamp, size_bytes, _ in backup_info ];

    def apply_retention_policy( self, original_file: Path ):
        """
        Remove the oldest backups beyond the limit for the file's size class.

        Args:
            original_file: Path to original file (used to determine backup pattern)
        """
        backups = self.get_existing_backups( original_file );

        if not backups:
            return;

        # Use current file size, or average of backups if original doesn't exist
        if original_file.exists():
            current_size = original_file.stat().st_size;
        else:
            sizes = [ size for _, _, size in backups ];
            current_size = sum( sizes ) / len( sizes );

        max_backups = self.max_small_files if current_size < self.size_threshold else self.max_large_files;

        if len( backups ) <= max_backups:
            return;

        backups_to_remove = backups[:-max_backups];

        for backup_path, _, _ in backups_to_remove:
            try:
                backup_path.unlink();
                self.logger.debug( f"Removed old backup: {backup_path.name}" );
            except OSError as e:
                self.logger.warning( f"Could not remove backup {backup_path}: {e}" );

        self.logger.info( f"Removed {len( backups_to_remove )} old backup(s) of {original_file.name}" );

    def create_backup( self, file_path: Path ) -> Path:
        """
        Create backup of file with timestamp and apply retention policy.

        Args:
            file_path: Path to file to backup

        Returns:
            Path to created backup file

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the copy fails
        """
        if not file_path.exists():
            raise FileNotFoundError( f"File to backup not found: {file_path}" );

        self.backup_dir.mkdir( parents=True, exist_ok=True );
        backup_path = self.backup_dir / self.get_backup_filename( file_path );

        shutil.copy2( file_path, backup_path );
        self.logger.debug( f"Created backup: {backup_path.name}" );

        self.apply_retention_policy( file_path );

        return backup_path;
