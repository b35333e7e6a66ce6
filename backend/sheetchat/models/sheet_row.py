# sheetchat/models/sheet_row.py

from sqlalchemy import Column, Integer, String, Text
from sheetchat.models.base import Base


class SheetRow(Base):
    __tablename__ = "sheet_rows"

    # Insertion order is the message order, same as a spreadsheet
    position = Column(Integer, primary_key=True, autoincrement=True)

    row_id = Column(String(255), nullable=False, index=True)
    ts = Column(String(32), nullable=False, default="")

    # Base64 text, no need for LargeBinary
    ciphertext = Column(Text, nullable=False, default="")

    version = Column(String(16), nullable=False, default="")
