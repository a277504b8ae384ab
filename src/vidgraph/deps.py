from fastapi import Depends
from sqlmodel import Session

from vidgraph.core.store import EntityStore
from vidgraph.db.session import get_session


def get_store(db_session: Session = Depends(get_session)) -> EntityStore:
    return EntityStore(db_session)
