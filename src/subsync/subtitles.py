"""
Subtitle shifting module: rewrites every cue timing in an SRT or ASS document.
"""
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .errors import MalformedTimestamp
from .logging import get_logger
from .timestamps import Dialect, decode, encode

# Line terminators are kept exactly as found
LINE_BREAK = re.compile( r"(\r\n|\n|\r)" );

# Coarse timing-line shapes; the timestamps themselves are validated by decode()
SRT_TIMING_LINE = re.compile(
    r"^(?P<lead>\s*)(?P<start>[0-9]+:[0-9:,.]+)(?P<arrow>\s*-->\s*)(?P<end>[0-9]+:[0-9:,.]+)(?P<rest>.*)$"
);
ASS_TIMING_LINE = re.compile(
    r"^(?P<lead>(?:Dialogue|Comment):[^,]*,)(?P<start>[^,]*)(?P<arrow>,)(?P<end>[^,]*)(?P<rest>,.*)$"
);

TIMING_LINES = {
    Dialect.SRT: SRT_TIMING_LINE,
    Dialect.ASS: ASS_TIMING_LINE,
};


@dataclass
class ShiftStats:
    """Counters collected while shifting one document."""
    cues: int = 0          # timing lines rewritten
    clamped: int = 0       # timing lines where a value hit zero
    malformed: int = 0     # timing lines left unmodified


def split_lines( text: str ) -> Iterator[Tuple[str, str]]:
    """
    Split text into (line, terminator) pairs.

    The final pair has an empty terminator; joining every pair gives back
    the original text unchanged.
    """
    parts = LINE_BREAK.split( text );
    for i in range( 0, len( parts ), 2 ):
        ending = parts[i + 1] if i + 1 < len( parts ) else "";
        yield parts[i], ending;


def shift_range( start_ms: int, end_ms: int, offset_ms: int ) -> Tuple[int, int]:
    """
    Shift a start/end pair, clamping each value at zero.

    An ordered range stays ordered: the clamped end never falls below the
    clamped start.
    """
    new_start = max( 0, start_ms + offset_ms );
    new_end = max( 0, end_ms + offset_ms );
    if start_ms <= end_ms:
        new_end = max( new_end, new_start );
    return new_start, new_end;


class SubtitleShifter:
    """
    Shifts cue timings in a subtitle document by a fixed offset.

    Only the timestamp substrings of timing lines change. Everything else
    (cue numbers, text, styling, blank lines, line endings) is copied
    through byte for byte.
    """

    def __init__( self, dialect: Dialect, offset_ms: int ):
        self.logger = get_logger();
        self.dialect = dialect;
        self.offset_ms = offset_ms;
        self.pattern = TIMING_LINES[dialect];
        self.stats = ShiftStats();

    def shift_line( self, line: str, line_number: int = 0 ) -> str:
        """
        Rewrite one line if it is a timing line, otherwise return it as is.

        Args:
            line: Line text without its terminator
            line_number: 1-based line number used in warnings

        Returns:
            The shifted line, or the original line when it is not a timing
            line or its timestamps cannot be decoded
        """
        match = self.pattern.match( line );
        if not match:
            return line;

        try:
            start_ms = decode( match.group( "start" ), self.dialect );
            end_ms = decode( match.group( "end" ), self.dialect );
            new_start, new_end = shift_range( start_ms, end_ms, self.offset_ms );
            start_text = encode( new_start, self.dialect );
            end_text = encode( new_end, self.dialect );
        except MalformedTimestamp as e:
            self.stats.malformed += 1;
            self.logger.warning( f"Line {line_number}: {e}; left unchanged" );
            return line;

        self.stats.cues += 1;
        if new_start != start_ms + self.offset_ms or new_end != end_ms + self.offset_ms:
            self.stats.clamped += 1;
            self.logger.debug( f"Line {line_number}: clamped to {start_text} -> {end_text}" );

        return "".join( [
            match.group( "lead" ),
            start_text,
            match.group( "arrow" ),
            end_text,
            match.group( "rest" ),
        ] );

    def shift_text( self, document_text: str ) -> str:
        """Shift every timing line of a whole document."""
        output = [];
        for number, ( line, ending ) in enumerate( split_lines( document_text ), start=1 ):
            output.append( self.shift_line( line, number ) );
            output.append( ending );
        return "".join( output );


def shift( document_text: str, dialect: Dialect, offset_ms: int, stats: Optional[ShiftStats] = None ) -> str:
    """
    Shift every cue timing in a document.

    Args:
        document_text: Full subtitle document
        dialect: Timestamp dialect of the document
        offset_ms: Signed offset in milliseconds (negative = earlier)
        stats: Optional ShiftStats to accumulate counters into

    Returns:
        The rewritten document
    """
    shifter = SubtitleShifter( dialect, offset_ms );
    if stats is not None:
        shifter.stats = stats;
    return shifter.shift_text( document_text );
