"""
Exception types raised by SubSync.
"""


class SubSyncError( RuntimeError ):
    """Base error for SubSync, carrying a process exit code."""
    
    def __init__( self, message: str, code: int = 1 ):
        super().__init__( message );
        self.code = code;


class MalformedTimestamp( SubSyncError, ValueError ):
    """A timestamp does not follow its dialect's exact grammar."""
    
    def __init__( self, text: str, dialect_name: str, reason: str = "" ):
        message = f"Malformed {dialect_name} timestamp: {text!r}";
        if reason:
            message = f"{message} ({reason})";
        super().__init__( message );
        self.text = text;
        self.dialect_name = dialect_name;


class FileOperationError( SubSyncError ):
    """I/O failure on a single file; the batch continues with the next one."""
    
    def __init__( self, path, reason ):
        super().__init__( f"{path}: {reason}", code=2 );
        self.path = path;
        self.reason = reason;


class UnreadableFile( FileOperationError ):
    pass


class UnwritableFile( FileOperationError ):
    pass


class FolderNotFound( SubSyncError ):
    """Target folder is missing or cannot be listed."""
    
    def __init__( self, folder ):
        super().__init__( f"Not a readable directory: {folder}", code=1 );
        self.folder = folder;
