from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import delete, select

from ..models_db import Chat, File


class ChatRepository:
    def create(self, db: Session, *, user_id: str, sender: str, content: str) -> Chat:
        msg = Chat(user_id=user_id, sender=sender, content=content)
        db.add(msg)
        db.commit()
        db.refresh(msg)
        return msg

    def list_for_user(self, db: Session, user_id: str) -> List[Chat]:
        return db.scalars(select(Chat).where(Chat.user_id == user_id).order_by(Chat.id.asc())).all()

    def delete_for_user(self, db: Session, user_id: str) -> int:
        result = db.execute(delete(Chat).where(Chat.user_id == user_id))
        db.commit()
        return result.rowcount


class FileRepository:
    def create(self, db: Session, *, user_id: str, name: str, size: int, type: Optional[str]) -> File:
        record = File(user_id=user_id, name=name, size=size, type=type)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    def list_for_user(self, db: Session, user_id: str) -> List[File]:
        return db.scalars(select(File).where(File.user_id == user_id).order_by(File.id.asc())).all()

    def delete_for_user(self, db: Session, user_id: str) -> int:
        result = db.execute(delete(File).where(File.user_id == user_id))
        db.commit()
        return result.rowcount
