"""
Keyset (cursor) pagination.

A cursor is the id of the first row of the page to fetch. Listings fetch
limit + 1 rows; the extra row, when present, becomes the next cursor and is
the first row of the following page.
"""

from sqlalchemy import and_, or_

from zelene.errors import ProcedureError
from zelene.extensions import db


def keyset_from(order, row):
    """
    Filter selecting rows at or after `row` in `order`.

    order: sequence of (column, attribute name, descending); the last entry
    must be unique (the primary key).
    """
    clauses = []
    equal_so_far = []
    last = len(order) - 1
    for i, (column, attr, descending) in enumerate(order):
        value = getattr(row, attr)
        if i == last:
            cmp = column <= value if descending else column >= value
        else:
            cmp = column < value if descending else column > value
        clauses.append(and_(*equal_so_far, cmp))
        equal_so_far.append(column == value)
    return or_(*clauses)


def order_by(order):
    return [column.desc() if descending else column.asc() for column, _, descending in order]


def cursor_page(model, stmt, order, *, limit: int, cursor=None):
    """Returns (rows, next_cursor)."""
    if cursor is not None:
        cursor_row = db.session.get(model, cursor)
        if cursor_row is None:
            raise ProcedureError("BAD_REQUEST", "Invalid cursor")
        stmt = stmt.where(keyset_from(order, cursor_row))

    stmt = stmt.order_by(*order_by(order)).limit(limit + 1)
    rows = db.session.execute(stmt).scalars().unique().all()

    next_cursor = None
    if len(rows) > limit:
        next_cursor = rows[limit].id
        rows = rows[:limit]
    return rows, next_cursor
