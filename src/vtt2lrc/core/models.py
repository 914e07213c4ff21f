"""Data models for subtitle conversion and audio extraction."""

from dataclasses import dataclass
from typing import Optional, Union

from ..config import CBR_BITRATE, VBR_QUALITY


@dataclass(frozen=True)
class TimeComponents:
    """A subtitle timestamp split into its fields."""

    minutes: int
    seconds: int
    milliseconds: int
    hours: int = 0

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    @property
    def centiseconds(self) -> int:
        # Truncated, never rounded
        return self.milliseconds // 10


@dataclass
class Cue:
    """One timed subtitle entry: an LRC start timestamp and its text."""

    start_timestamp: str
    text: str = ""

    def append(self, fragment: str) -> None:
        """Append a cleaned text fragment, joining with a single space."""
        if not fragment:
            return
        self.text = f"{self.text} {fragment}" if self.text else fragment


# ----------------------
# MP3 encoding modes
# ----------------------


@dataclass(frozen=True)
class Vbr:
    """Variable-quality MP3 encoding (lower is better)."""

    quality: int = VBR_QUALITY


@dataclass(frozen=True)
class Cbr:
    """Constant-bitrate MP3 encoding."""

    bitrate: str = CBR_BITRATE


Mp3Mode = Union[Vbr, Cbr]


def describe_mode(mode: Mp3Mode) -> str:
    """Short human-readable label for an encoding mode."""
    if isinstance(mode, Vbr):
        return f"VBR (q={mode.quality})"
    if isinstance(mode, Cbr):
        return f"CBR ({mode.bitrate})"
    raise TypeError(f"Unknown MP3 mode: {mode!r}")


# ----------------------
# Extraction outcomes
# ----------------------


@dataclass(frozen=True)
class ExtractError:
    """Base for the failure kinds attached to a failed ExtractResult."""

    detail: Optional[str]

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class IoFailure(ExtractError):
    """Reading, writing or copying scratch or destination bytes failed."""


@dataclass(frozen=True)
class InvalidInput(ExtractError):
    """The input reference is malformed or cannot be matched."""


@dataclass(frozen=True)
class EncoderFailure(ExtractError):
    """The external encoder returned a non-success status."""

    code: int = -1


@dataclass(frozen=True)
class OutputDirMissing(ExtractError):
    """The destination directory does not exist or cannot be accessed."""


@dataclass(frozen=True)
class ExtractResult:
    """Outcome of extracting one audio track."""

    input_name: str
    output_name: str
    success: bool
    message: str
    output_location: Optional[str] = None
    error: Optional[ExtractError] = None
    # Encoder stderr, kept for the optional per-item encoder log
    encoder_output: str = ""

    @classmethod
    def succeeded(
        cls,
        input_name: str,
        output_name: str,
        output_location: str,
        message: str,
        encoder_output: str = "",
    ) -> "ExtractResult":
        return cls(
            input_name=input_name,
            output_name=output_name,
            success=True,
            message=message,
            output_location=output_location,
            encoder_output=encoder_output,
        )

    @classmethod
    def failed(
        cls,
        input_name: str,
        output_name: str,
        message: str,
        error: ExtractError,
        encoder_output: str = "",
    ) -> "ExtractResult":
        return cls(
            input_name=input_name,
            output_name=output_name,
            success=False,
            message=message,
            error=error,
            encoder_output=encoder_output,
        )


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting one subtitle file to LRC."""

    input_name: str
    output_name: Optional[str]
    success: bool
    message: str
    output_location: Optional[str] = None


@dataclass(frozen=True)
class EncoderSession:
    """Status and diagnostics of one encoder invocation."""

    return_code: Optional[int]
    output: str = ""

    @property
    def succeeded(self) -> bool:
        return self.return_code == 0
