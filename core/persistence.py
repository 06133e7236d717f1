import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _encode(obj: Any) -> Any:
    # Dataset records and tuples of them serialize through to_dict()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class OutputWriter:
    """Writes generated datasets into the output directory, one whole file at a time."""

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)

    def ensure_directory(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def save_text(self, filename: str, text: str) -> Path:
        path = self.output_dir / filename
        tmp = path.with_name(f".{path.name}.tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
        logger.info(f"Saved: {filename}")
        return path

    def save_json(self, filename: str, data: Any) -> Path:
        return self.save_text(filename, json.dumps(data, indent=2, ensure_ascii=False, default=_encode))
