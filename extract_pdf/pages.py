"""Page range resolution."""

from .extractors import PageRange


def resolve_page_range(start_page: int, end_offset: int, total_pages: int) -> PageRange:
    """Return the inclusive range ``[start_page, total_pages - end_offset]``.

    The result is not clamped; an end before the start yields an empty range
    and each extractor decides what that means.
    """
    return PageRange(start_page=start_page, end_page=total_pages - end_offset)
