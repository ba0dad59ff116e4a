"""
In-memory stand-in for SubprocessChannel.

Feeds scripted optimizer lines to the loop and records what the client writes.
"""

from typing import Iterable, List, Sequence

from hmclient.core.errors import ChannelClosed, EndOfStream


class ScriptedChannel:
    def __init__(self, lines: Sequence[str]):
        self._lines = list(lines)
        self._cursor = 0
        self.blocks: List[List[str]] = []
        self.closed = False
        self.close_calls = 0

    def read_line(self) -> str:
        if self.closed:
            raise ChannelClosed("scripted channel is closed")
        if self._cursor >= len(self._lines):
            raise EndOfStream("scripted channel ran out of lines")
        line = self._lines[self._cursor]
        self._cursor += 1
        return line

    def write_block(self, lines: Iterable[str]) -> None:
        if self.closed:
            raise ChannelClosed("scripted channel is closed")
        self.blocks.append(list(lines))

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1

    @property
    def unread(self) -> List[str]:
        return self._lines[self._cursor:]
