# quotebook/models/counter.py
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from quotebook.db import Base


class DocumentCounter(Base):
    """Last issued sequence number per (kind prefix, year). Never decremented."""

    __tablename__ = "document_counters"

    kind: Mapped[str] = mapped_column(String(16), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    last_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<DocumentCounter {self.kind}-{self.year} last_seq={self.last_seq}>"
