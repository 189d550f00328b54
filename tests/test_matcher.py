"""
Test cases for subtitle to video matching.
"""
import pytest
from pathlib import Path
from unittest.mock import patch
import sys

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from subsync.matcher import MediaFile, MediaRole, classify, match_all, output_name_for


def video( name ):
    return MediaFile.from_name( name, MediaRole.VIDEO );


def subtitle( name ):
    return MediaFile.from_name( name, MediaRole.SUBTITLE );


class TestClassify:
    """Folder listings are split by extension."""

    def test_partition_keeps_order( self ):
        videos, subtitles = classify( [
            "b.E02.mp4", "a.E01.MKV", "notes.txt", "x - 01.srt", "cover.jpg", "y - 02.ASS", "old.avi"
        ] );
        assert [ v.name for v in videos ] == [ "b.E02.mp4", "a.E01.MKV", "old.avi" ];
        assert [ s.name for s in subtitles ] == [ "x - 01.srt", "y - 02.ASS" ];
        assert all( v.role is MediaRole.VIDEO for v in videos );
        assert all( s.role is MediaRole.SUBTITLE for s in subtitles );

    def test_episode_extracted( self ):
        videos, subtitles = classify( [ "Show.E03.mkv", "Show - 03.srt", "orphan.srt" ] );
        assert videos[0].episode == 3;
        assert subtitles[0].episode == 3;
        assert subtitles[1].episode is None;

    def test_unsupported_subtitle_formats_ignored( self ):
        videos, subtitles = classify( [ "a.vtt", "b.ssa", "c.sub" ] );
        assert videos == [] and subtitles == [];


class TestMatchAll:
    """Binding subtitles to videos."""

    def test_matched_scenario( self ):
        results = match_all( [ video( "Show.E01.mkv" ) ], [ subtitle( "[Group] Show - 01.srt" ) ] );
        assert len( results ) == 1;
        assert results[0].matched;
        assert results[0].video.name == "Show.E01.mkv";
        assert results[0].output_name == "Show.E01.srt";

    def test_unmatched_scenario( self ):
        results = match_all( [], [ subtitle( "orphan.srt" ) ] );
        assert not results[0].matched;
        assert results[0].video is None;
        assert results[0].output_name == "shifted_orphan.srt";

    def test_no_video_with_same_episode( self ):
        results = match_all( [ video( "Show.E02.mkv" ) ], [ subtitle( "Show - 01.ass" ) ] );
        assert results[0].output_name == "shifted_Show - 01.ass";

    def test_video_without_episode_never_matches( self ):
        results = match_all( [ video( "Trailer.mkv" ) ], [ subtitle( "Subtitle.srt" ) ] );
        assert not results[0].matched;

    def test_every_subtitle_emitted_in_order( self ):
        subtitles = [ subtitle( "Show - 02.srt" ), subtitle( "orphan.ass" ), subtitle( "Show - 01.ass" ) ];
        results = match_all( [ video( "Show.E01.mkv" ), video( "Show.E02.mkv" ) ], subtitles );
        assert [ r.subtitle.name for r in results ] == [ "Show - 02.srt", "orphan.ass", "Show - 01.ass" ];
        assert [ r.output_name for r in results ] == [ "Show.E02.srt", "shifted_orphan.ass", "Show.E01.ass" ];

    def test_duplicate_episode_first_video_wins( self ):
        videos = [ video( "Show.E01.720p.mkv" ), video( "Show.E01.1080p.mkv" ) ];
        with patch( "subsync.matcher.get_logger" ) as mock_get_logger:
            results = match_all( videos, [ subtitle( "Show - 01.srt" ) ] );
        assert results[0].output_name == "Show.E01.720p.srt";
        assert mock_get_logger.return_value.warning.called;

    def test_custom_prefix( self ):
        results = match_all( [], [ subtitle( "orphan.srt" ) ], fallback_prefix="synced-" );
        assert results[0].output_name == "synced-orphan.srt";

    def test_inputs_not_modified( self ):
        videos = [ video( "Show.E01.mkv" ) ];
        subtitles = [ subtitle( "Show - 01.srt" ) ];
        match_all( videos, subtitles );
        assert [ v.name for v in videos ] == [ "Show.E01.mkv" ];
        assert [ s.name for s in subtitles ] == [ "Show - 01.srt" ];


class TestOutputName:
    """Output names keep the subtitle's own extension."""

    def test_extension_from_subtitle( self ):
        assert output_name_for( subtitle( "x - 01.ASS" ), video( "Show.E01.mp4" ) ) == "Show.E01.ASS";

    def test_video_name_with_dots( self ):
        assert output_name_for( subtitle( "x - 01.srt" ), video( "Show.S01E01.1080p.WEB.mkv" ) ) == "Show.S01E01.1080p.WEB.srt";

    def test_fallback_keeps_full_name( self ):
        assert output_name_for( subtitle( "a.b.srt" ), None ) == "shifted_a.b.srt";


if __name__ == '__main__':
    pytest.main( [ __file__ ] );
