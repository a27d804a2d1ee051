"""Helpers for walking repository query results page by page.

``order_by`` is always explicit: aggregates do not share a timestamp field.
"""

PAGE_SIZE = 100


def iterate_all(repo, order_by, page_size=None, **filters):
    """Yield every record matching ``filters``, fetching ``page_size`` at a time."""
    page_size = page_size or PAGE_SIZE
    offset = 0
    while True:
        page = repo._dao.query.filter(**filters).order_by(order_by).offset(offset).limit(page_size).all()
        yield from page.items
        if not page.has_next:
            break
        offset += page_size


def fetch_page(repo, order_by, page=1, page_size=20, **filters):
    """One page of matching records plus the total count."""
    query = repo._dao.query.filter(**filters) if filters else repo._dao.query
    result = query.order_by(order_by).offset((page - 1) * page_size).limit(page_size).all()
    return result.items, result.total
