from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import IO, Iterable, Mapping, Optional, Sequence, Union

from hmclient.core.errors import ChannelClosed, EndOfStream, ProtocolError, SpawnError

logger = logging.getLogger(__name__)


class SubprocessChannel:
    """
    Line-oriented, half-duplex channel to a long-lived child process.

    Owns the child and both of its pipes: ``to_child`` (child's stdin) and
    ``from_child`` (child's stdout). The child's stderr is inherited so its
    diagnostics reach the console directly.

    ``close()`` closes both pipes but never kills the child; the child is
    expected to exit on its own once it has sent the termination sentinel.
    Use ``wait()`` to reap it. A closed channel cannot be reopened.
    """

    def __init__(self, process: subprocess.Popen, command: Sequence[str]):
        self._process = process
        self.command = list(command)
        self._to_child: Optional[IO[str]] = process.stdin
        self._from_child: Optional[IO[str]] = process.stdout
        self._closed = False

    @classmethod
    def launch(
        cls,
        command: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Union[str, Path]] = None,
    ) -> "SubprocessChannel":
        """
        Spawn ``command`` with piped stdin/stdout.

        Raises:
            SpawnError: If the process cannot be created.
        """
        command = [str(part) for part in command]
        if not command:
            raise SpawnError("Cannot launch an empty command")
        display = shlex.join(command)
        logger.info(f"Executing command: {display}")
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                cwd=str(cwd) if cwd is not None else None,
                env={**os.environ, **env} if env is not None else None,
                text=True,
                encoding="utf-8",
                bufsize=1,
            )
        except OSError as exc:
            raise SpawnError(f"Failed to start {display}: {exc}") from exc
        logger.info(f"Process started with PID {process.pid}")
        return cls(process, command)

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def returncode(self) -> Optional[int]:
        return self._process.poll()

    def _require_open(self) -> None:
        if self._closed:
            raise ChannelClosed(f"Channel to PID {self.pid} is closed")

    def read_line(self) -> str:
        """
        Block until one full line arrives from the child; return it without the terminator.

        Raises:
            EndOfStream: If the child closes its output before a newline.
            ProtocolError: If the child writes bytes that are not valid UTF-8.
        """
        self._require_open()
        assert self._from_child is not None
        try:
            line = self._from_child.readline()
        except UnicodeDecodeError as exc:
            bad = exc.object[exc.start : exc.end]
            raise ProtocolError(
                f"Child process {self.pid} sent undecodable bytes {bad!r} at offset {exc.start}: {exc.reason}"
            ) from exc
        if not line:
            raise EndOfStream(f"Child process {self.pid} closed its output (exit code {self.returncode})")
        if not line.endswith("\n"):
            raise EndOfStream(f"Child process {self.pid} closed its output mid-line: {line!r}")
        logger.debug(f"Received: {line.rstrip()}")
        return line[:-1].rstrip("\r")

    def write_line(self, text: str) -> None:
        """Write ``text`` plus a newline and flush immediately."""
        self.write_block([text])

    def write_block(self, lines: Iterable[str]) -> None:
        """
        Write several newline-terminated lines with a single flush.

        Raises:
            EndOfStream: If the child has closed its input.
        """
        self._require_open()
        assert self._to_child is not None
        payload = "".join(f"{line}\n" for line in lines)
        try:
            self._to_child.write(payload)
            self._to_child.flush()
        except BrokenPipeError as exc:
            raise EndOfStream(f"Child process {self.pid} closed its input: {exc}") from exc
        logger.debug(f"Sent:\n{payload.rstrip()}")

    def close(self) -> None:
        """Close both pipes. Idempotent; does not terminate the child."""
        if self._closed:
            return
        self._closed = True
        for name, stream in (("to-child", self._to_child), ("from-child", self._from_child)):
            if stream is None:
                continue
            try:
                stream.close()
            except BrokenPipeError:
                # The child already exited; data still buffered for it is moot.
                logger.warning(f"Child process {self.pid} exited before the {name} pipe was closed")
        logger.debug(f"Closed channel to PID {self.pid}")

    def wait(self, timeout: Optional[float] = None) -> int:
        """Reap the child and return its exit code."""
        return self._process.wait(timeout=timeout)

    def __enter__(self) -> "SubprocessChannel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"SubprocessChannel(pid={self.pid}, {state}, command={shlex.join(self.command)!r})"
