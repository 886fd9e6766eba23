import math

from memory_match.errors import InvalidInput


def parse_int_arg(args, name, default=None):
    """Read an integer query argument, rejecting anything that is not one."""
    raw = args.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f'{name} must be an integer')


def validate_pagination(limit, page, max_limit):
    if limit < 1 or limit > max_limit:
        raise InvalidInput(f'Limit must be between 1 and {max_limit}')
    if page < 1:
        raise InvalidInput('Page must be greater than 0')


def page_metadata(total, limit, page):
    """Pagination block for a response; a page past the last one is invalid.

    An empty collection still has a (empty) first page.
    """
    total_pages = math.ceil(total / limit)
    if page > max(total_pages, 1):
        raise InvalidInput(f'Page {page} is out of range (total pages: {total_pages})')
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
        'hasNext': page < total_pages,
        'hasPrev': page > 1,
    }
