"""
Filesystem output for modularization results.

Every step is idempotent: an existing components directory is reused and
files from earlier runs are overwritten.
"""
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, List, Union

from componentsplit.core.error_handling import OutputWriteError, wrap_os_errors
from componentsplit.models.code_element import GeneratedModule

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class OutputWriter:
    """Writes generated modules into a components directory and updates the host file."""

    def __init__(self, components_dir: PathLike, lock_timeout: float = 10.0):
        self.components_dir = Path(components_dir)
        self.lock_timeout = lock_timeout

    @wrap_os_errors
    def ensure_directory(self, path: PathLike) -> Path:
        path = Path(path)
        if not path.is_dir():
            logger.info(f"Creating components directory {path}")
        path.mkdir(parents=True, exist_ok=True)
        return path

    @wrap_os_errors
    def write_file(self, path: PathLike, content: str) -> Path:
        path = Path(path)
        with open(path, 'w', encoding='utf8') as fh:
            fh.write(content)
        logger.info(f"  Wrote {path}")
        return path

    def write_modules(self, modules: Iterable[GeneratedModule]) -> List[Path]:
        """
        Write each module as ``<components_dir>/<filename>``.

        A failing write raises ``OutputWriteError``; files written before it
        are left in place.
        """
        self.ensure_directory(self.components_dir)
        return [self.write_file(self.components_dir / module.filename, module.code) for module in modules]

    def write_host(self, path: PathLike, content: str) -> Path:
        """Overwrite the host file in place while holding its lock file."""
        path = Path(path)
        with self._file_lock(path):
            return self.write_file(path, content)

    @contextmanager
    def _file_lock(self, path: Path):
        lock_path = path.with_suffix(path.suffix + '.lock')
        deadline = time.monotonic() + self.lock_timeout
        while True:
            try:
                fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                os.close(fd)
                break
            except FileExistsError:
                if time.monotonic() > deadline:
                    raise OutputWriteError(str(path), f"lock file {lock_path} is held by another run")
                time.sleep(0.05)
            except OSError as e:
                raise OutputWriteError(str(path), e.strerror or str(e)) from e
        try:
            yield
        finally:
            try:
                os.remove(lock_path)
            except OSError:
                pass
