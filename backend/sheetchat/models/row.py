# sheetchat/models/row.py

from pydantic import BaseModel

PROTOCOL_VERSION = "v1"
ROW_FIELDS = ("id", "ts", "ciphertext", "version")


class Row(BaseModel):
    """One line of the sheet: [id, ts, ciphertext, version]."""

    id: str
    ts: str
    ciphertext: str
    version: str

    def to_values(self) -> list[str]:
        return [self.id, self.ts, self.ciphertext, self.version]

    @classmethod
    def from_values(cls, values) -> "Row":
        # The Sheets API drops trailing empty cells, so short rows are normal
        cells = [str(v) if v is not None else "" for v in list(values)[:4]]
        cells += [""] * (4 - len(cells))
        return cls(**dict(zip(ROW_FIELDS, cells)))

    def is_supported(self) -> bool:
        return self.version == PROTOCOL_VERSION
