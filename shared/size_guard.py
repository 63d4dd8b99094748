import logging

from shared.settings import BYTE_CEILING

logger = logging.getLogger(__name__)


class ByteCeilingReader:
    """Cap the number of bytes readable from a wrapped binary stream.

    Once ``limit`` bytes have been handed out, ``read`` returns ``b''`` as if
    the stream had ended. Closing the reader closes the wrapped stream.
    """

    def __init__(self, stream, limit=BYTE_CEILING):
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        self.stream = stream
        self.limit = limit
        self.bytes_read = 0
        self.closed = False

    @property
    def remaining(self):
        return self.limit - self.bytes_read

    @property
    def reached_limit(self):
        return self.bytes_read >= self.limit

    def readable(self):
        return True

    def read(self, size=-1):
        if size == 0:
            return self.stream.read(0)
        if self.reached_limit:
            return b""
        if size is None or size < 0 or size > self.remaining:
            size = self.remaining
        data = self.stream.read(size)
        self.bytes_read += len(data)
        if self.reached_limit:
            logger.info(f"Byte ceiling of {self.limit} reached; ending input")
        return data

    def close(self):
        if not self.closed:
            self.closed = True
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
