from ticketd.shared.http import MAX_ID

PAGE_SIZE = 20
# Largest page whose offset still fits in an id-sized integer
MAX_PAGE = MAX_ID // PAGE_SIZE


def clamp_limit(limit: int) -> int:
    return PAGE_SIZE if limit <= 0 else limit


def clamp_offset(offset: int) -> int:
    return max(offset, 0)


def page_offset(page: int) -> int:
    return (max(page, 1) - 1) * PAGE_SIZE


def total_pages(total: int) -> int:
    """Number of pages needed for ``total`` rows; an empty result is one page."""
    if total == 0:
        return 1
    return (total + PAGE_SIZE - 1) // PAGE_SIZE


def prev_page(current: int) -> int:
    return current - 1 if current > 1 else 0


def next_page(current: int, total: int) -> int:
    return current + 1 if current < total_pages(total) else 0
