"""
Pairs subtitle files with video files by episode number.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Dict, Iterable, List, Optional, Tuple

from . import episodes
from .logging import get_logger

VIDEO_EXTENSIONS = ( ".mkv", ".mp4", ".avi" );
SUBTITLE_EXTENSIONS = ( ".srt", ".ass" );
DEFAULT_FALLBACK_PREFIX = "shifted_";


class MediaRole( Enum ):
    VIDEO = "video"
    SUBTITLE = "subtitle"


@dataclass( frozen=True )
class MediaFile:
    """A file name with its role and extracted episode number."""
    name: str
    role: MediaRole
    episode: Optional[int] = None

    @classmethod
    def from_name( cls, name: str, role: MediaRole ) -> "MediaFile":
        return cls( name=name, role=role, episode=episodes.extract( name ) );

    @property
    def stem( self ) -> str:
        return PurePath( self.name ).stem;

    @property
    def suffix( self ) -> str:
        return PurePath( self.name ).suffix;


@dataclass( frozen=True )
class MatchResult:
    """A subtitle bound to zero or one video, with its output file name."""
    subtitle: MediaFile
    video: Optional[MediaFile]
    output_name: str

    @property
    def matched( self ) -> bool:
        return self.video is not None;


def classify( filenames: Iterable[str] ) -> Tuple[List[MediaFile], List[MediaFile]]:
    """
    Partition a folder listing into videos and subtitles by extension.

    Listing order is kept; files with other extensions are ignored.

    Returns:
        Tuple of (videos, subtitles)
    """
    videos = [];
    subtitles = [];
    for name in filenames:
        suffix = PurePath( name ).suffix.lower();
        if suffix in VIDEO_EXTENSIONS:
            videos.append( MediaFile.from_name( name, MediaRole.VIDEO ) );
        elif suffix in SUBTITLE_EXTENSIONS:
            subtitles.append( MediaFile.from_name( name, MediaRole.SUBTITLE ) );
    return videos, subtitles;


def output_name_for( subtitle: MediaFile, video: Optional[MediaFile], fallback_prefix: str = DEFAULT_FALLBACK_PREFIX ) -> str:
    """
    Derive the output file name for a subtitle.

    Matched subtitles take the video's name with the subtitle's extension;
    unmatched ones get the fallback prefix in front of their own name.
    """
    if video is None:
        return f"{fallback_prefix}{subtitle.name}";
    return f"{video.stem}{subtitle.suffix}";


def index_videos( videos: Iterable[MediaFile] ) -> Dict[int, MediaFile]:
    """Map episode numbers to the first video carrying each one."""
    logger = get_logger();
    by_episode = {};
    for video in videos:
        if video.episode is None:
            logger.debug( f"No episode number in video name: {video.name}" );
            continue;
        if video.episode in by_episode:
            logger.warning( f"Episode {video.episode} is ambiguous: using {by_episode[video.episode].name}, " \
                            f"ignoring {video.name}" );
            continue;
        by_episode[video.episode] = video;
    return by_episode;


def match_all( videos: Iterable[MediaFile], subtitles: Iterable[MediaFile], fallback_prefix: str = DEFAULT_FALLBACK_PREFIX ) -> List[MatchResult]:
    """
    Bind each subtitle to the video with the same episode number.

    Args:
        videos: Video files in enumeration order (first wins on duplicates)
        subtitles: Subtitle files to place
        fallback_prefix: Prefix for subtitles without a matching video

    Returns:
        One MatchResult per subtitle, in subtitle order
    """
    logger = get_logger();
    by_episode = index_videos( videos );

    results = [];
    for subtitle in subtitles:
        video = by_episode.get( subtitle.episode ) if subtitle.episode is not None else None;
        if video is None:
            logger.debug( f"No matching video for {subtitle.name} (episode: {subtitle.episode})" );
        results.append( MatchResult(
            subtitle=subtitle,
            video=video,
            output_name=output_name_for( subtitle, video, fallback_prefix )
        ) );
    return results;
