"""
Test cases for the SRT / ASS timestamp codec.
"""
import pytest
from pathlib import Path
import sys

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from subsync.errors import MalformedTimestamp
from subsync.timestamps import Dialect, decode, dialect_for, encode


class TestDecode:
    """Strict parsing of both dialects."""

    def test_decode_srt( self ):
        """SRT fields map to hours, minutes, seconds and milliseconds."""
        assert decode( "00:00:00,000", Dialect.SRT ) == 0;
        assert decode( "01:02:03,456", Dialect.SRT ) == 3723456;
        assert decode( "99:59:59,999", Dialect.SRT ) == 359999999;

    def test_decode_ass( self ):
        """ASS fraction is centiseconds, scaled to milliseconds."""
        assert decode( "0:00:00.00", Dialect.ASS ) == 0;
        assert decode( "1:02:03.45", Dialect.ASS ) == 3723450;
        assert decode( "0:00:01.07", Dialect.ASS ) == 1070;

    def test_decode_ass_accepts_padded_hours( self ):
        """ASS hours are un-padded but padded hours still parse."""
        assert decode( "00:00:01.00", Dialect.ASS ) == 1000;
        assert decode( "12:00:00.00", Dialect.ASS ) == 43200000;

    @pytest.mark.parametrize( "text", [
        "1:02:03,456",       # hour width
        "01:02:03.456",      # wrong separator
        "01:02:03,45",       # millisecond width
        "01:02:03,4567",
        "01:2:03,456",
        "01:60:00,000",      # minutes out of range
        "01:00:60,000",      # seconds out of range
        " 00:00:01,000",     # surrounding whitespace
        "00:00:01,000 ",
        "00:00:01",
        "",
        "aa:bb:cc,ddd",
    ] )
    def test_decode_srt_rejects( self, text ):
        """Anything off the exact SRT grammar raises."""
        with pytest.raises( MalformedTimestamp ):
            decode( text, Dialect.SRT );

    @pytest.mark.parametrize( "text", [
        "0:00:01,00",        # wrong separator
        "0:0:01.00",
        "0:00:01.000",       # millisecond precision is not ASS
        "0:00:01.0",
        "0:61:00.00",
        ":00:01.00",
        "0:00:01.00\r",
    ] )
    def test_decode_ass_rejects( self, text ):
        """Anything off the exact ASS grammar raises."""
        with pytest.raises( MalformedTimestamp ):
            decode( text, Dialect.ASS );

    def test_malformed_is_value_error( self ):
        """MalformedTimestamp can be caught as a ValueError."""
        with pytest.raises( ValueError ):
            decode( "nope", Dialect.SRT );


class TestEncode:
    """Formatting of both dialects."""

    def test_encode_srt( self ):
        """SRT output is zero padded to fixed widths."""
        assert encode( 0, Dialect.SRT ) == "00:00:00,000";
        assert encode( 3723456, Dialect.SRT ) == "01:02:03,456";
        assert encode( 570, Dialect.SRT ) == "00:00:00,570";

    def test_encode_ass( self ):
        """ASS hours are not padded, fraction has two digits."""
        assert encode( 0, Dialect.ASS ) == "0:00:00.00";
        assert encode( 3723450, Dialect.ASS ) == "1:02:03.45";
        assert encode( 360000000, Dialect.ASS ) == "100:00:00.00";

    def test_encode_ass_truncates_milliseconds( self ):
        """Sub-centisecond remainders are dropped, not rounded."""
        assert encode( 1005, Dialect.ASS ) == "0:00:01.00";
        assert encode( 1999, Dialect.ASS ) == "0:00:01.99";

    def test_encode_negative_raises( self ):
        """Negative times are never encoded."""
        for dialect in Dialect:
            with pytest.raises( MalformedTimestamp ):
                encode( -1, dialect );

    def test_encode_srt_overflow_raises( self ):
        """SRT cannot hold 100 hours in two digits."""
        assert encode( 359999999, Dialect.SRT ) == "99:59:59,999";
        with pytest.raises( MalformedTimestamp ):
            encode( 360000000, Dialect.SRT );


class TestRoundTrip:
    """decode and encode are inverse operations."""

    def test_srt_strings_round_trip( self ):
        """Every well-formed SRT string survives decode then encode."""
        for text in [ "00:00:00,000", "00:00:00,001", "00:59:59,999", "10:20:30,405", "99:00:00,000" ]:
            assert encode( decode( text, Dialect.SRT ), Dialect.SRT ) == text;

    def test_ass_strings_round_trip_after_normalizing( self ):
        """ASS round trips, with padded hours normalized away."""
        assert encode( decode( "0:01:02.03", Dialect.ASS ), Dialect.ASS ) == "0:01:02.03";
        assert encode( decode( "00:01:02.03", Dialect.ASS ), Dialect.ASS ) == "0:01:02.03";
        assert encode( decode( "12:34:56.78", Dialect.ASS ), Dialect.ASS ) == "12:34:56.78";

    def test_values_round_trip( self ):
        """Representable values come back unchanged."""
        for ms in [ 0, 1, 999, 1000, 59999, 3600000, 86399999 ]:
            assert decode( encode( ms, Dialect.SRT ), Dialect.SRT ) == ms;
        for ms in [ 0, 10, 990, 1000, 59990, 3600000, 86399990 ]:
            assert decode( encode( ms, Dialect.ASS ), Dialect.ASS ) == ms;


class TestDialectFor:
    """Dialect is picked from the extension only."""

    def test_known_extensions( self ):
        assert dialect_for( "episode.srt" ) is Dialect.SRT;
        assert dialect_for( "episode.ass" ) is Dialect.ASS;
        assert dialect_for( "EPISODE.SRT" ) is Dialect.SRT;
        assert dialect_for( Path( "dir/episode.Ass" ) ) is Dialect.ASS;

    def test_unknown_extensions( self ):
        assert dialect_for( "episode.ssa" ) is None;
        assert dialect_for( "episode.mkv" ) is None;
        assert dialect_for( "episode" ) is None;


if __name__ == '__main__':
    pytest.main( [ __file__ ] );
