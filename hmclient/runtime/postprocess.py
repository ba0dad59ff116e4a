from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from rich.console import Console

from hmclient.core.errors import SpawnError

logger = logging.getLogger(__name__)


def run_postprocessing(
    command: Sequence[str],
    console: Optional[Console] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> int:
    """
    Run a one-shot post-processing command (e.g. Pareto front computation).

    Combined stdout/stderr is streamed line by line to ``console`` as it is
    produced. The exit status is returned and logged but not otherwise acted on.

    Raises:
        SpawnError: If the process cannot be started.
    """
    console = console or Console()
    command = [str(part) for part in command]
    display = shlex.join(command)
    logger.info(f"Executing {display}")
    try:
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=str(cwd) if cwd is not None else None,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        raise SpawnError(f"Failed to start {display}: {exc}") from exc

    with process:
        assert process.stdout is not None
        for line in process.stdout:
            console.print(line.rstrip("\n"), markup=False, highlight=False, soft_wrap=True)
        exit_code = process.wait()

    if exit_code != 0:
        logger.warning(f"Post-processing exited with code {exit_code}: {display}")
    else:
        logger.info("Post-processing completed")
    return exit_code
