from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

TIMESTAMP_COLUMN = "timestamp"


@dataclass
class CompiledTable:
    """Row-per-frame, column-per-attribute view over recorded frames"""
    pid: int
    columns: List[str]
    timestamps: List[float] = field(default_factory=list)
    rows: List[List[Optional[float]]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows)

    def column(self, name: str) -> List[Optional[float]]:
        """Return every value of one column, in frame order."""
        index = self.columns.index(name)
        return [row[index] for row in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        """Materialize the table as a DataFrame indexed by timestamp."""
        df = pd.DataFrame(self.rows, columns=self.columns, dtype="float64")
        df.index = pd.Index(self.timestamps, name=TIMESTAMP_COLUMN, dtype="float64")
        return df

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'pid': self.pid,
            'count': self.count,
            'columns': list(self.columns),
            'frames': [
                {TIMESTAMP_COLUMN: ts, **dict(zip(self.columns, row))}
                for ts, row in zip(self.timestamps, self.rows)
            ]
        }
