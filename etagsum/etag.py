from pathlib import Path
from contextlib import contextmanager
from typing import BinaryIO, NamedTuple, Tuple, Union
import hashlib
import logging
import re
import sys

import humanfriendly

from .chunksize import DEFAULT_CHUNKSIZE, format_chunksize

logger = logging.getLogger(__name__)

READ_BLOCKSIZE = 1024 * 1024
STDIN = '-'

_ETAG = re.compile(r'([0-9a-fA-F]{32})(?:-([1-9][0-9]*))?')


class EtagResult(NamedTuple):
    """
    The etag of a local file, along with how it was derived
    """
    filename: str
    etag: str
    parts: int
    size: int

    @property
    def multipart(self) -> bool:
        return self.parts > 1


@contextmanager
def open_source(path: Union[str, Path]):
    """
    Opens a file for binary reading, treating "-" as stdin. Stdin is not closed afterwards
    """
    if str(path) == STDIN:
        yield sys.stdin.buffer
    else:
        with open(path, 'rb') as f:
            yield f


def read_chunk(f: BinaryIO, digest, chunksize: int) -> int:
    """
    Feeds up to chunksize bytes from f into digest
    :return: The number of bytes read, which is only short of chunksize at the end of the file
    """
    written = 0
    while written < chunksize:
        block = f.read(min(READ_BLOCKSIZE, chunksize - written))
        if not block:
            break
        digest.update(block)
        written += len(block)
    return written


def etag_file(path: Union[str, Path], chunksize: int = DEFAULT_CHUNKSIZE) -> EtagResult:
    """
    Calculates the etag S3 would report for a local file uploaded in chunks of a given size
    :param path: The file to calculate an etag for, or "-" for stdin
    :param chunksize: The size of each part in a multipart S3 upload
    :return: The etag, with its part count and the number of bytes hashed
    """
    if chunksize < 1:
        raise ValueError(f'chunksize must be positive, not {chunksize}')

    filename = str(path)
    with open_source(filename) as f:
        try:
            part = hashlib.md5()
            size = read_chunk(f, part, chunksize)
            first = part.digest()

            part = hashlib.md5()
            written = read_chunk(f, part, chunksize)
            if written == 0:
                # The whole file fit in one part, so S3 reports the plain md5
                return EtagResult(filename, first.hex(), 1, size)

            # The etag of a multipart upload is the md5 of the concatenated part digests
            whole = hashlib.md5(first)
            parts = 1
            while written > 0:
                parts += 1
                size += written
                whole.update(part.digest())
                part = hashlib.md5()
                written = read_chunk(f, part, chunksize)
        except OSError as e:
            if e.errno is None:
                raise OSError(f'{filename}: {e}') from e
            raise OSError(e.errno, e.strerror, filename) from e

    return EtagResult(filename, f'{whole.hexdigest()}-{parts}', parts, size)


def compute_etag(path: Union[str, Path], chunksize: int = DEFAULT_CHUNKSIZE) -> str:
    """
    Calculates the etag for a local file
    :param path: The file to calculate an etag for
    :param chunksize: The size of each chunk in a multipart S3 upload
    :return: An S3 etag
    """
    result = etag_file(path, chunksize)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug('%s: %s in %d part(s) of up to %s', result.filename,
                     humanfriendly.format_size(result.size, binary=True), result.parts,
                     format_chunksize(chunksize))
    return result.etag


def parse_etag(etag: str) -> Tuple[str, int]:
    """
    Splits an etag, as S3 reports it, into its digest and part count
    :param etag: An etag such as "d41d8cd98f00b204e9800998ecf8427e" or "9b2cf535f27731c974343645a3985328-2",
        optionally surrounded by double quotes
    :return: The lowercase hex digest, and the number of parts, which is 1 for a single part upload
    """
    match = _ETAG.fullmatch(etag.strip().strip('"'))
    if match is None:
        raise ValueError(f'invalid etag {etag!r}')
    digest, parts = match.groups()
    return digest.lower(), int(parts) if parts else 1
