"""
Timestamp codec for the two supported subtitle dialects.

Timestamps are plain integer milliseconds. Each dialect has a fixed text
grammar:

- SRT (SubRip): ``HH:MM:SS,mmm``
- ASS (Advanced SubStation): ``H:MM:SS.cc`` (un-padded hours, centiseconds)

Decoding is strict; anything that does not follow the grammar exactly
raises MalformedTimestamp.
"""
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Optional
import pysrt

from .errors import MalformedTimestamp


@dataclass( frozen=True )
class TimestampFormat:
    """Per-dialect grammar and layout constants."""
    label: str
    pattern: re.Pattern
    template: str
    fraction_scale: int              # milliseconds per fraction unit
    max_ms: Optional[int] = None     # largest encodable value, None for unbounded


class Dialect( Enum ):
    SRT = "srt"
    ASS = "ass"

    @property
    def format( self ) -> TimestampFormat:
        return TIMESTAMP_FORMATS[self];

    @property
    def extension( self ) -> str:
        return f".{self.value}";


TIMESTAMP_FORMATS = {
    Dialect.SRT: TimestampFormat(
        label="SRT",
        pattern=re.compile( r"(\d{2}):(\d{2}):(\d{2}),(\d{3})", re.ASCII ),
        template="{hours:02d}:{minutes:02d}:{seconds:02d},{fraction:03d}",
        fraction_scale=1,
        max_ms=( ( 99 * 60 + 59 ) * 60 + 59 ) * 1000 + 999
    ),
    Dialect.ASS: TimestampFormat(
        label="ASS",
        pattern=re.compile( r"(\d+):(\d{2}):(\d{2})\.(\d{2})", re.ASCII ),
        template="{hours:d}:{minutes:02d}:{seconds:02d}.{fraction:02d}",
        fraction_scale=10
    ),
};


def dialect_for( filename ) -> Optional[Dialect]:
    """
    Pick the dialect from a file's extension.

    Args:
        filename: File name or path (``.srt`` / ``.ass``, any case)

    Returns:
        Matching Dialect, or None for unsupported extensions
    """
    suffix = PurePath( str( filename ) ).suffix.lower();
    for dialect in Dialect:
        if suffix == dialect.extension:
            return dialect;
    return None;


def decode( text: str, dialect: Dialect ) -> int:
    """
    Parse a timestamp string into milliseconds.

    Args:
        text: Timestamp text, without surrounding whitespace
        dialect: Dialect whose grammar the text must follow

    Returns:
        Milliseconds since zero

    Raises:
        MalformedTimestamp: If the text does not follow the grammar exactly
    """
    fmt = dialect.format;
    match = fmt.pattern.fullmatch( text );
    if not match:
        raise MalformedTimestamp( text, fmt.label );

    hours, minutes, seconds, fraction = ( int( group ) for group in match.groups() );
    if minutes >= 60 or seconds >= 60:
        raise MalformedTimestamp( text, fmt.label, "minutes and seconds must be below 60" );

    return pysrt.SubRipTime( hours, minutes, seconds, fraction * fmt.fraction_scale ).ordinal;


def encode( ms: int, dialect: Dialect ) -> str:
    """
    Format milliseconds as a zero-padded timestamp string.

    ASS keeps centiseconds only; leftover milliseconds are truncated.

    Raises:
        MalformedTimestamp: If the value is negative or too large for the dialect
    """
    fmt = dialect.format;
    if ms < 0:
        raise MalformedTimestamp( str( ms ), fmt.label, "negative time" );
    if fmt.max_ms is not None and ms > fmt.max_ms:
        raise MalformedTimestamp( str( ms ), fmt.label, "exceeds largest encodable time" );

    time = pysrt.SubRipTime.from_ordinal( ms );
    return fmt.template.format(
        hours=time.hours,
        minutes=time.minutes,
        seconds=time.seconds,
        fraction=time.milliseconds // fmt.fraction_scale
    );
