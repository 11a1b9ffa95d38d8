from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class Frame:
    """One row of samples taken by a single ProcessDataSet.record() call"""
    timestamp: float
    # Keyed by attribute data set type; None marks a missing sample
    values: Dict[type, Optional[float]] = field(default_factory=dict)
