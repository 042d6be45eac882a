"""
Entity Store 보조 함수.

서비스 계층은 Session 으로 조회/추가/삭제를 직접 수행하고,
상태 전이(compare-and-swap)와 멱등 insert 만 이 모듈을 거칩니다.
"""

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from eduplatform.core.exceptions import PersistenceError


def update_if(db: Session, model, record_id: str, patch: dict, *preconditions) -> bool:
    """
    id 와 precondition 이 모두 일치하는 행만 갱신합니다. commit 은 호출자 몫.
    갱신된 행이 없으면 False (다른 요청이 먼저 상태를 바꾼 경우).
    """
    try:
        updated = (
            db.query(model)
            .filter(and_(model.id == record_id, *preconditions))
            .update(patch, synchronize_session=False)
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to update {model.__tablename__} {record_id}: {e}") from e
    return updated == 1


def insert_if_absent(db: Session, model, **values) -> bool:
    """
    동일한 값의 행이 없을 때만 insert. 이미 있으면 False 를 반환하고 예외는 내지 않습니다.
    동시에 같은 행을 넣는 경우 unique 제약 위반은 savepoint 안에서 흡수합니다.
    """
    filters = [getattr(model, key) == value for key, value in values.items()]
    try:
        if db.query(model).filter(*filters).first():
            return False
        with db.begin_nested():
            db.add(model(**values))
            db.flush()
        return True
    except IntegrityError:
        return False
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to insert into {model.__tablename__}: {e}") from e


def commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to commit transaction: {e}") from e
