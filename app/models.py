from sqlalchemy import Column, Integer, String, Text, JSON
from app.database import Base


class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_level = Column(String, index=True, nullable=False)  # '10', '11', '12', 'UG', 'general'
    stream = Column(String, index=True)
    course = Column(String, index=True)
    year = Column(String)
    question_id = Column(String, index=True, nullable=False)
    question_text = Column(Text, nullable=False)
    question_type = Column(String, nullable=False)
    options = Column(JSON)  # {"a": "...", "b": "..."}
    correct_answer = Column(String, nullable=False)
    subject = Column(String)
    difficulty = Column(String)
    explanation = Column(Text)
    created_at = Column(String)  # ISO-8601
