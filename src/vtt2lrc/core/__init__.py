"""Core functionality modules.

Only the data models are imported eagerly; the batch drivers live in their
own submodules so the converters can be used without the encoder stack.
"""

from .models import (
    Cbr,
    ConversionResult,
    Cue,
    EncoderFailure,
    ExtractError,
    ExtractResult,
    InvalidInput,
    IoFailure,
    Mp3Mode,
    OutputDirMissing,
    TimeComponents,
    Vbr,
)

__all__ = [
    "Cbr",
    "ConversionResult",
    "Cue",
    "EncoderFailure",
    "ExtractError",
    "ExtractResult",
    "InvalidInput",
    "IoFailure",
    "Mp3Mode",
    "OutputDirMissing",
    "TimeComponents",
    "Vbr",
]
