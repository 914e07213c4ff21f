"""ffmpeg command construction and execution."""

import shlex
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from ..config import ENCODER_TIMEOUT, MP3_ENCODER, get_encoder_binary
from ..utils.logging import get_logger
from .models import Cbr, EncoderSession, Mp3Mode, Vbr

logger = get_logger(__name__)


def audio_args(mode: Mp3Mode) -> str:
    """Codec arguments for the selected MP3 mode."""
    if isinstance(mode, Vbr):
        return f"-c:a {MP3_ENCODER} -q:a {mode.quality}"
    if isinstance(mode, Cbr):
        return f"-c:a {MP3_ENCODER} -b:a {mode.bitrate}"
    raise TypeError(f"Unknown MP3 mode: {mode!r}")


def build_ffmpeg_command(input_path: str, output_path: str, mode: Mp3Mode) -> str:
    """Build the argument string: overwrite, drop video, encode audio to MP3."""
    return f'-y -i "{input_path}" -vn {audio_args(mode)} "{output_path}"'


class EncoderRunner(ABC):
    """Runs one encoder command and reports its status."""

    @abstractmethod
    def run(self, command: str) -> EncoderSession:
        pass


class FFmpegRunner(EncoderRunner):
    """Runs ffmpeg as a subprocess, capturing stderr as diagnostics."""

    def __init__(self, binary: Optional[str] = None, timeout: float = ENCODER_TIMEOUT):
        self.binary = binary or get_encoder_binary()
        self.timeout = timeout

    def build_args(self, command: str) -> List[str]:
        return [self.binary, "-hide_banner", "-nostdin"] + shlex.split(command)

    def run(self, command: str) -> EncoderSession:
        args = self.build_args(command)
        logger.debug(f"Running encoder: {shlex.join(args)}")
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return EncoderSession(None, f"Encoder not found: {self.binary}")
        except subprocess.TimeoutExpired:
            return EncoderSession(None, f"Encoder timed out after {self.timeout:.0f}s")
        except OSError as e:
            return EncoderSession(None, f"Encoder could not start: {e}")

        return EncoderSession(result.returncode, result.stderr or "")
