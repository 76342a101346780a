"""A line-oriented console that serializes readers and writers."""

from __future__ import annotations

import sys
from typing import TextIO

from kernsync.synch import Semaphore

END_OF_LINE = "\n"
END_OF_STREAM = "\x01"


class SynchConsole:
    """A console whose reads and writes each happen as one unit.

    Only one thread reads a line at a time and only one thread writes a
    line at a time, so concurrent lines never interleave. Streams default
    to the process's standard input and output.
    """

    def __init__(
        self,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        self._input = input_stream
        self._output = output_stream
        self._read_line_block = Semaphore("Read Synch Line Block", 1)
        self._write_line_block = Semaphore("Write Synch Line Block", 1)

    @property
    def input_stream(self) -> TextIO:
        return self._input if self._input is not None else sys.stdin

    @property
    def output_stream(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def write(self, data: str) -> int:
        """Write every character of ``data`` and return how many were written."""
        stream = self.output_stream
        self._write_line_block.acquire()
        try:
            for ch in data:
                stream.write(ch)
            stream.flush()
        finally:
            self._write_line_block.release()
        return len(data)

    def read(self, num_bytes: int) -> str:
        """Read a line of at most ``num_bytes`` characters.

        Reading stops at a newline (which is consumed but not returned),
        after ``num_bytes`` characters, or when the input runs out.
        A Ctrl-A character marks the end of the stream and raises
        EOFError.
        """
        if num_bytes < 0:
            raise ValueError("num_bytes must be non-negative")
        stream = self.input_stream
        chars: list[str] = []
        self._read_line_block.acquire()
        try:
            while len(chars) < num_bytes:
                ch = stream.read(1)
                if not ch or ch == END_OF_LINE:
                    break
                if ch == END_OF_STREAM:
                    raise EOFError("end of console stream")
                chars.append(ch)
        finally:
            self._read_line_block.release()
        return "".join(chars)

    def __repr__(self) -> str:
        return "SynchConsole()"