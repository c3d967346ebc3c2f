"""Target file writer for ovirt-bridge.

Writes target groups as a Prometheus file_sd JSON document. The file is
replaced atomically (temp file in the same directory, then rename) so the
watching collector never reads a half-written document.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from ovirt_bridge.core.exceptions import TargetWriteError
from ovirt_bridge.models.target import TargetGroup
from ovirt_bridge.utils.logging import get_logger

logger = get_logger("writer")

FILE_MODE = 0o644


class TargetWriter:
    """Serializes target groups and replaces the output file.

    Args:
        path: Output file watched by Prometheus.

    Example:
        >>> writer = TargetWriter("/etc/prometheus/engine-hosts.json")
        >>> writer.write(groups)
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    @staticmethod
    def render(groups: Sequence[TargetGroup] | None) -> str:
        """Serialize groups to the on-disk format.

        A missing or empty sequence is rendered as ``[]``.

        Args:
            groups: Target groups to serialize.

        Returns:
            JSON text with 2-space indentation and a trailing newline.
        """
        data = [g.to_dict() for g in groups or ()]
        return json.dumps(data, indent=2) + "\n"

    def write(self, groups: Sequence[TargetGroup] | None) -> Path:
        """Write groups to the output path, replacing previous content.

        Args:
            groups: Target groups to write.

        Returns:
            The path that was written.

        Raises:
            TargetWriteError: If the file cannot be written or renamed.
        """
        content = self.render(groups)
        directory = self.path.parent
        tmp_name: str | None = None

        try:
            with tempfile.NamedTemporaryFile(
                "w",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())

            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, self.path)

        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise TargetWriteError(str(self.path), e.strerror or str(e)) from e

        logger.debug(f"Wrote {len(groups or ())} target group(s) to {self.path}")
        return self.path
