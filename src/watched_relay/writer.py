"""Write watch descriptors to the output directory."""

import logging
from pathlib import Path

from .models import WatchDescriptor

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def descriptor_filename(title: str, season: int | None = None, episode: int | None = None) -> str:
    """Build the file name downstream tooling expects.

    Episodes get ``"<title> - S<season>E<episode>.json"`` without zero padding,
    movies just ``"<title>.json"``.
    """
    if season is None or episode is None:
        return f"{title}.json"
    return f"{title} - S{season}E{episode}.json"


class DescriptorWriter:
    """Serialize descriptors as indented JSON, overwriting same-named files."""

    def __init__(self, output_dir: Path | str) -> None:
        self.output_dir = Path(output_dir)

    def write(self, descriptor: WatchDescriptor, filename: str) -> Path | None:
        """Write ``descriptor`` to ``filename`` and return the path, or None on failure."""
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("Error creating output directory %s", self.output_dir)
            return None

        output_path = self.output_dir / filename
        try:
            output_path.write_text(descriptor.model_dump_json(indent=2), encoding="utf-8")
        except (OSError, ValueError):
            logger.exception("Error writing file %s", output_path)
            return None

        logger.debug("Wrote %s", output_path)
        return output_path
