"""
SubSync - Subtitle shifting and batch renaming utility.

Shifts every timestamp in .srt / .ass subtitle files by a fixed offset
and renames them to match companion video files by episode number.
"""

__version__ = "0.1.0";
__author__ = "SubSync Project";
__license__ = "MIT";
