import os
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, scoped_session, sessionmaker

Base = declarative_base()


class History(Base):
    __tablename__ = 'history'
    id = Column(Integer, primary_key=True)
    summary = Column(Text, nullable=False)
    quiz = Column(JSON, nullable=False)
    flashcards = Column(JSON, nullable=False)
    original_text = Column(Text, nullable=False, default='')
    level = Column(String(32))
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'summary': self.summary,
            'quiz': self.quiz,
            'flashcards': self.flashcards,
            'originalText': self.original_text,
            'level': self.level,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


def make_session(database_url: str):
    if database_url.startswith('sqlite:///'):
        path = database_url[len('sqlite:///'):]
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
    engine = create_engine(database_url, future=True)
    Base.metadata.create_all(engine)
    return scoped_session(sessionmaker(bind=engine))
