"""
Episode number extraction from media file names.

Rules are tried in priority order and the first one that matches wins:

1. ``E01`` / ``e001`` (also inside ``S01E05``)
2. ``ep12`` / ``Episode 7`` / ``EP_03``
3. ``- 01`` (hyphen, spaces, digits), as used by most release groups
"""
import re
from typing import Callable, List, Optional

# (?!\d) keeps longer digit runs (years, resolutions) from counting
E_NUMBER = re.compile( r"e(\d{1,3})(?!\d)", re.IGNORECASE | re.ASCII );
EP_WORD = re.compile( r"ep(?:isode)?[\s._-]*(\d{1,3})(?!\d)", re.IGNORECASE | re.ASCII );
DASH_NUMBER = re.compile( r"-\s+(\d{1,3})(?!\d)", re.ASCII );

# Release checksums such as [1E2A4B3C] are never episode numbers
CRC_TAG = re.compile( r"[\[(][0-9A-F]{8}[\])]", re.IGNORECASE | re.ASCII );


def _first_number( pattern, filename: str ) -> Optional[int]:
    match = pattern.search( filename );
    if match:
        return int( match.group( 1 ) );
    return None;


def match_e_number( filename: str ) -> Optional[int]:
    """Rule 1: E or e followed by 1-3 digits."""
    return _first_number( E_NUMBER, filename );


def match_ep_word( filename: str ) -> Optional[int]:
    """Rule 2: ep / episode, optional separator, 1-3 digits."""
    return _first_number( EP_WORD, filename );


def match_dash_number( filename: str ) -> Optional[int]:
    """Rule 3: hyphen, one or more spaces, 1-3 digits."""
    return _first_number( DASH_NUMBER, filename );


EPISODE_RULES: List[Callable[[str], Optional[int]]] = [
    match_e_number,
    match_ep_word,
    match_dash_number,
];


def extract( filename: str ) -> Optional[int]:
    """
    Derive the episode number from a file name.

    Args:
        filename: Bare file name, extension included; CRC32 tags are ignored

    Returns:
        Episode number with leading zeros dropped, or None if no rule matched
    """
    name = CRC_TAG.sub( "", filename );
    for rule in EPISODE_RULES:
        episode = rule( name );
        if episode is not None:
            return episode;
    return None;
