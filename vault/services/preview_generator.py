"""Preview (thumbnail) derivation for image and video uploads."""

import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, ImageOps

from common.logging_config import get_logger
from vault.exceptions import PreviewError

logger = get_logger(__name__)

FrameExtractor = Callable[[Path, Path], None]

PREVIEW_CATEGORIES = ("image", "video")


class FfmpegFrameExtractor:
    """
    Extracts the first keyframe of a video into a PNG file with ffmpeg.
    """

    def __init__(self, command: str = "ffmpeg", timeout_seconds: float = 30.0):
        self.command = command
        self.timeout_seconds = timeout_seconds

    def __call__(self, source: Path, output: Path) -> None:
        argv = [
            self.command,
            "-hide_banner",
            "-loglevel", "error",
            "-nostdin",
            "-y",
            "-skip_frame", "nokey",
            "-i", str(source),
            "-frames:v", "1",
            "-f", "image2",
            str(output),
        ]
        try:
            result = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise PreviewError(f"Frame extraction timed out after {self.timeout_seconds}s") from e
        except OSError as e:
            raise PreviewError(f"Frame extractor unavailable: {e}") from e

        if result.returncode != 0 or not output.exists() or output.stat().st_size == 0:
            detail = result.stderr.decode(errors="replace").strip()
            raise PreviewError(f"Frame extraction failed: {detail or 'no frame produced'}")


class PreviewGenerator:
    """
    Produces bounded-size JPEG previews.

    Images are resized directly. Videos go through the frame extractor first
    and the extracted frame is encoded the same way. Other categories are
    skipped without error.
    """

    def __init__(
        self,
        max_dimension: int = 300,
        quality: int = 80,
        frame_extractor: Optional[FrameExtractor] = None,
    ):
        self.max_dimension = max_dimension
        self.quality = quality
        self.frame_extractor = frame_extractor or FfmpegFrameExtractor()

    def generate(self, category: str, source: Path, destination: Path) -> Optional[Path]:
        """
        Derive a preview for a stored file.

        Args:
            category: Detected top-level media category
            source: Original file on disk
            destination: Where the JPEG preview should be written

        Returns:
            The destination path, or None when the category has no preview

        Raises:
            PreviewError: If decoding or extraction fails; no partial artifact is left behind
        """
        if category not in PREVIEW_CATEGORIES:
            return None

        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            if category == "image":
                self._encode(source, destination)
            else:
                self._encode_video_frame(source, destination)
        except PreviewError:
            destination.unlink(missing_ok=True)
            raise
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            destination.unlink(missing_ok=True)
            raise PreviewError(f"Cannot decode {source.name}: {e}") from e

        logger.debug(f"Preview written to {destination}")
        return destination

    def _encode_video_frame(self, source: Path, destination: Path) -> None:
        with tempfile.TemporaryDirectory(prefix="vault-frame-") as tmpdir:
            frame_path = Path(tmpdir) / "frame.png"
            self.frame_extractor(source, frame_path)
            self._encode(frame_path, destination)

    def _encode(self, source: Path, destination: Path) -> None:
        with Image.open(source) as image:
            image.seek(0)
            preview = ImageOps.exif_transpose(image)
            preview.thumbnail((self.max_dimension, self.max_dimension))
            if preview.mode != "RGB":
                preview = preview.convert("RGB")
            preview.save(destination, format="JPEG", quality=self.quality)
