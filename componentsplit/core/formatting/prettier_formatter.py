"""
Formatter delegating to the Prettier command-line tool.
"""
import logging
import shutil
import subprocess
from typing import List

from componentsplit.core.error_handling import FormatError
from componentsplit.core.formatting.formatter import BaseFormatter

logger = logging.getLogger(__name__)


class PrettierFormatter(BaseFormatter):
    """Runs ``prettier`` on stdin; the parser is inferred from the file name."""

    name = 'prettier'

    def build_command(self, executable: str, filename: str) -> List[str]:
        options = self.options
        command = [
            executable,
            '--stdin-filepath', filename,
            '--tab-width', str(options.tab_width),
            '--trailing-comma', options.trailing_comma,
        ]
        if options.single_quote:
            command.append('--single-quote')
        if not options.semi:
            command.append('--no-semi')
        return command

    def format_code(self, code: str, filename: str = 'module.jsx') -> str:
        executable = shutil.which(self.options.prettier_executable)
        if executable is None:
            raise FormatError(f"Prettier executable '{self.options.prettier_executable}' not found",
                              formatter=self.name)
        command = self.build_command(executable, filename)
        logger.debug(f"Running {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                input=code,
                capture_output=True,
                text=True,
                encoding='utf8',
                timeout=self.options.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise FormatError(f"Prettier timed out after {self.options.timeout}s", formatter=self.name) from e
        except OSError as e:
            raise FormatError(f"Prettier could not be started: {e}", formatter=self.name) from e
        if completed.returncode != 0:
            message = (completed.stderr or completed.stdout or '').strip().splitlines()
            detail = message[0] if message else f"exit status {completed.returncode}"
            raise FormatError(f"Prettier rejected {filename}: {detail}", formatter=self.name)
        return completed.stdout
