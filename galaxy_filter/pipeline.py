"""Decode -> project -> encode pipeline over a gzip'd galaxy dump."""
import json
import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Iterator, Optional

from galaxy_filter.json_worker.record_decoder import Body, decode_body
from galaxy_filter.json_worker.streaming_parser import StreamingJSONParser
from shared.diagnostics import Diagnostics
from shared.settings import ARRAY_ELEMENT_DEPTH, BYTE_CEILING, PROGRESS_EVERY

logger = logging.getLogger(__name__)

# <, >, & and U+2028/U+2029 are escaped inside strings, as in the established output format.
_HTML_ESCAPES = (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"),
                 ("\u2028", "\\u2028"), ("\u2029", "\\u2029"))


@dataclass
class RunStats:
    records: int = 0
    skipped: int = 0
    encode_failures: int = 0
    bytes_read: int = 0
    truncated: bool = False


def _compact_number(value: float):
    # integral floats print as 0, not 0.0
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _compact_floats(obj):
    if isinstance(obj, float):
        return _compact_number(obj)
    if isinstance(obj, dict):
        return {k: _compact_floats(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_compact_floats(v) for v in obj]
    return obj


def encode_body(body: Body) -> bytes:
    """Encode one Body as a single newline-terminated JSON document.

    Raises ValueError for values JSON cannot represent (NaN, Infinity).
    """
    text = json.dumps(
        _compact_floats(body.to_dict()),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    for raw, escaped in _HTML_ESCAPES:
        text = text.replace(raw, escaped)
    return (text + "\n").encode("utf-8")


def iter_encoded(values: Iterable[Any], diagnostics: Optional[Diagnostics] = None,
                 stats: Optional[RunStats] = None) -> Iterator[bytes]:
    """Yield one encoded line per object in ``values``; other values are skipped."""
    diagnostics = diagnostics or Diagnostics()
    stats = stats if stats is not None else RunStats()
    for value in values:
        if not isinstance(value, dict):
            stats.skipped += 1
            continue
        body = decode_body(value)
        try:
            line = encode_body(body)
        except (TypeError, ValueError) as e:
            stats.encode_failures += 1
            diagnostics.warn("could not marshal JSON for body %d: %s", body.id64, e)
            continue
        stats.records += 1
        if stats.records % PROGRESS_EVERY == 0:
            logger.info("%s records written", stats.records)
        yield line


def run(input: BinaryIO, output: BinaryIO, *, limit: int = BYTE_CEILING,
        depth: int = ARRAY_ELEMENT_DEPTH, diagnostics: Optional[Diagnostics] = None) -> RunStats:
    """Stream gzip'd JSON from ``input`` and write projected bodies to ``output``.

    Raises FatalError (via ``diagnostics.fatal``) when ``input`` is not gzip
    data; nothing is written in that case. Neither stream is closed.
    """
    diagnostics = diagnostics or Diagnostics()
    parser = StreamingJSONParser(depth=depth, diagnostics=diagnostics)
    stats = RunStats()
    with parser.open_compressed(input, limit) as reader:
        for line in iter_encoded(parser.iter_values(reader), diagnostics, stats):
            output.write(line)
        stats.bytes_read = reader.bytes_read
        stats.truncated = reader.reached_limit
    output.flush()
    logger.info("Done %s records (%s skipped, %s failed) from %s bytes",
                stats.records, stats.skipped, stats.encode_failures, stats.bytes_read)
    return stats
