#!/usr/bin/env python3
"""Constant-memory streaming parser for gzip-compressed galaxy dumps."""
import codecs, contextlib, gzip, logging, zlib
from typing import Any, BinaryIO, Iterator

import ijson

from shared.diagnostics import Diagnostics
from shared.settings import ARRAY_ELEMENT_DEPTH, BYTE_CEILING
from shared.size_guard import ByteCeilingReader

logger = logging.getLogger(__name__)


def prefix_for_depth(depth: int) -> str:
    """Return the ijson prefix selecting values nested ``depth`` arrays deep."""
    if depth < 0:
        raise ValueError(f"depth must be >= 0, got {depth}")
    return ".".join(["item"] * depth)


class ReplacingUTF8Reader:
    """Re-encode a byte stream as valid UTF-8, replacing bad sequences with U+FFFD.

    Does not own the wrapped stream.
    """

    def __init__(self, stream):
        self.stream = stream
        self.decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def read(self, size=-1):
        if size == 0:
            return b""
        while True:
            data = self.stream.read(size)
            final = not data
            text = self.decoder.decode(data, final=final)
            # a split multi-byte sequence decodes to nothing until its tail arrives
            if text or final:
                return text.encode("utf-8")


class StreamingJSONParser:
    def __init__(self, depth: int = ARRAY_ELEMENT_DEPTH, diagnostics: Diagnostics = None):
        self.depth = depth
        self.prefix = prefix_for_depth(depth)
        self.diagnostics = diagnostics or Diagnostics()

    @contextlib.contextmanager
    def open_compressed(self, source: BinaryIO, limit: int = BYTE_CEILING) -> Iterator[ByteCeilingReader]:
        """Yield ``source`` decompressed and capped at ``limit`` bytes.

        The gzip header is checked before anything is yielded so a bad or
        empty file fails before output starts. ``source`` itself is left open.
        """
        zr = gzip.GzipFile(fileobj=source, mode="rb")
        try:
            head = zr.peek(1)
        except (OSError, EOFError, zlib.error) as e:
            zr.close()
            self.diagnostics.fatal("could not create gzip reader: %s", e)
        if not head:
            zr.close()
            self.diagnostics.fatal("could not create gzip reader: empty input")
        with ByteCeilingReader(zr, limit) as reader:
            yield reader

    def iter_values(self, stream) -> Iterator[Any]:
        """Yield each value at the configured depth without loading the document.

        Invalid UTF-8 inside strings is replaced, not fatal. Truncated or
        malformed input ends the sequence with a single warning; values
        yielded before that point stand.
        """
        count = 0
        try:
            for value in ijson.items(ReplacingUTF8Reader(stream), self.prefix, use_float=True):
                count += 1
                yield value
        except (ijson.JSONError, EOFError, OSError, zlib.error) as e:
            if isinstance(stream, ByteCeilingReader) and stream.reached_limit:
                self.diagnostics.warn(
                    "input truncated at byte ceiling (%d bytes) after %d values",
                    stream.limit, count)
            else:
                self.diagnostics.warn("input ended early after %d values: %s", count, e)
        logger.debug("parser finished after %d values", count)
