from typing import Type
from sqlmodel import SQLModel, Session, select, func

def next_ticket_number(session: Session, model: Type[SQLModel], prefix: str) -> str:
    """Next sequential ticket for ``model``, e.g. ``PRJ-00042``.

    Numbers are zero-padded to five digits and keep growing past ``99999``;
    ordering by length first keeps ``PRJ-100000`` above ``PRJ-99999``.
    The column is unique; a concurrent insert with the same number fails at commit.
    """
    last = session.exec(
        select(model.ticket_number)
        .where(model.ticket_number.startswith(f"{prefix}-"))
        .order_by(func.length(model.ticket_number).desc(), model.ticket_number.desc())
        .limit(1)
    ).first()

    if last is None:
        return f"{prefix}-00001"

    next_number = int(last.split("-", 1)[1]) + 1
    return f"{prefix}-{next_number:05d}"
