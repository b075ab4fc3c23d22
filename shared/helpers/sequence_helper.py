from sqlalchemy.orm import Session


def next_number(db: Session, column, prefix: str, width: int) -> str:
    """Next `{prefix}{n}` value, one past the highest numeric suffix already stored.

    Deleted rows leave gaps rather than freeing their numbers.
    """
    rows = db.query(column).filter(column.like(f"{prefix}%")).all()
    suffixes = [value[len(prefix):] for (value,) in rows if value]
    last = max((int(s) for s in suffixes if s.isdigit()), default=0)
    return f"{prefix}{last + 1:0{width}d}"
