import argparse
import logging
import sys

from . import etag
from .chunksize import ChunksizeError, DEFAULT_CHUNKSIZE, format_chunksize, parse_chunksize

logger = logging.getLogger(__name__)


def chunksize_type(size: str) -> int:
    """
    Argparse "type" for a chunksize in bytes, or with a KB, MB, GB or TB suffix
    """
    try:
        return parse_chunksize(size)
    except ChunksizeError as e:
        raise argparse.ArgumentTypeError(str(e))


def etag_arg(value: str) -> str:
    """
    Argparse "type" for an etag to check against
    """
    try:
        etag.parse_etag(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        'etagsum', description='Calculates the S3 etag of local files for a given multipart chunksize')
    parser.add_argument('files', nargs='+', metavar='FILE',
                        help='Files to calculate an etag for, or "-" for stdin (use ./- for a file named -)')
    parser.add_argument('--chunksize', '-c', type=chunksize_type, default=DEFAULT_CHUNKSIZE,
                        help='multipart_chunksize used for upload in bytes or with a size suffix KB, MB, GB, '
                             'or TB (default: {})'.format(format_chunksize(DEFAULT_CHUNKSIZE)))
    parser.add_argument('--check', '-C', metavar='ETAG', type=etag_arg, default=None,
                        help='Exit with an error if the etag of the file differs from this one')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log the size and part count of each file')
    return parser


def entry(args) -> int:
    """
    Main function for the CLI
    :return: The exit status, 1 if any file failed
    """
    n_errors = 0
    for filename in args.files:
        try:
            result = etag.compute_etag(filename, args.chunksize)
        except OSError as e:
            print(f'ERROR: {e}', file=sys.stderr)
            n_errors += 1
            continue

        print(f'{result:<39} {filename}')

        if args.check is not None and etag.parse_etag(args.check) != etag.parse_etag(result):
            print(f'ERROR: {filename}: etag {result} does not match {args.check}', file=sys.stderr)
            n_errors += 1

    return 1 if n_errors else 0


def main(argv=None):
    """
    Command-line entrypoint
    """
    parser = get_parser()
    args = parser.parse_args(argv)
    if args.check is not None and len(args.files) > 1:
        parser.error('--check only applies to a single file')

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, stream=sys.stderr,
                        format='%(levelname)s %(name)s: %(message)s')
    logger.debug('Using a chunksize of %s', format_chunksize(args.chunksize))
    sys.exit(entry(args))


if __name__ == '__main__':
    main()
