"""
Store primitives shared by the repositories.

`insert_if_absent` is the conditional add used wherever two requests may race
to create the same row (badge per course, earner per badge, history per
user/course, chapter per history entry). It is a single
`INSERT ... ON CONFLICT DO NOTHING` against the table's unique key, so the
store decides the winner and the loser simply observes `False`.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_if_absent(db: Session, model, **values) -> bool:
    """Insert a row unless one with the same unique key exists. Returns True if inserted."""
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        # Settings rejects other backends at startup
        raise NotImplementedError(f"conditional insert not supported for dialect {dialect!r}")
    result = db.execute(insert(model).values(**values).on_conflict_do_nothing())
    return result.rowcount == 1
