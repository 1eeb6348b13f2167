from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UnrecognizedQuery(Base):
    """Prompts that fell through to the fallback template"""
    __tablename__ = "unrecognized_queries"

    id = Column(Integer, primary_key=True)
    prompt = Column(Text, nullable=False)
    confidence = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ParseLog(Base):
    __tablename__ = "parse_logs"

    id = Column(Integer, primary_key=True)
    prompt = Column(Text, nullable=False)
    command_type = Column(String(32))
    template_used = Column(String(64))
    confidence = Column(Float)
    success = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
