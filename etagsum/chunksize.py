import re

DEFAULT_CHUNKSIZE = 8 * 1024 * 1024

# Checked largest first
UNITS = {
    'TB': 40,
    'GB': 30,
    'MB': 20,
    'KB': 10,
}

_DIGITS = re.compile(r'[0-9]+')


class ChunksizeError(ValueError):
    """
    Base class for chunksize parsing failures
    """


class ChunksizeSyntaxError(ChunksizeError):
    """
    The text is not a decimal number that fits once its unit is applied
    """


class NonPositiveChunksizeError(ChunksizeError):
    """
    The text parsed to a chunksize of zero bytes
    """


def parse_chunksize(text: str) -> int:
    """
    Parses a chunksize given in bytes, or with a binary size suffix, e.g. "15MB"
    :param text: The chunksize as typed by the user
    :return: The chunksize in bytes
    """
    number = text
    shift = 0
    for suffix, scale in UNITS.items():
        if text.endswith(suffix):
            number = text[:-len(suffix)]
            shift = scale
            break

    if not _DIGITS.fullmatch(number):
        raise ChunksizeSyntaxError(f'invalid chunksize {text!r}')

    # 2 ** 63 has 19 digits, so anything longer is out of range whatever the unit
    number = number.lstrip('0') or '0'
    if len(number) > 19 or int(number) >= 1 << (63 - shift):
        raise ChunksizeSyntaxError(f'chunksize {text!r} is out of range')

    size = int(number) << shift
    if size < 1:
        raise NonPositiveChunksizeError('non-positive chunksize')
    return size


def format_chunksize(size: int) -> str:
    """
    Formats a chunksize using the largest suffix that divides it evenly
    """
    if size:
        for suffix, scale in UNITS.items():
            if size % (1 << scale) == 0:
                return f'{size >> scale}{suffix}'
    return str(size)
