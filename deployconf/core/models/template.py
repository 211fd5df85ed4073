"""
Generated file model — plan files produced by synth.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file produced by the synth phase.

    Attributes:
        path:      Path relative to the output root.
        content:   Full file content.
        unit:      Provisioning unit the file describes.
        overwrite: Whether to replace an existing file.
        reason:    Why this file was generated.
    """

    path: str
    content: str
    unit: str = ""
    overwrite: bool = False
    reason: str = ""

    def target(self, root: Path) -> Path:
        """Absolute location of this file under ``root``."""
        return root / self.path
