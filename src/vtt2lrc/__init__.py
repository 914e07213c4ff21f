"""vtt2lrc - Convert VTT subtitles to LRC lyrics and extract MP3 audio from videos."""

__version__ = "1.0.0"
