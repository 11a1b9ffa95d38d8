from pathlib import Path
from typing import List, Optional


class MonitorConfig:
    sleep_interval: float
    record_interval: float
    record_frames: int
    output_dir: Optional[Path]
    log_level: str
    log_file: Optional[Path]
    attributes: List[str]
    exporters: List[str]

    def __str__(self):
        return (f"MonitorConfig(\n"
                f"  sleep_interval={self.sleep_interval},\n"
                f"  record_interval={self.record_interval},\n"
                f"  record_frames={self.record_frames},\n"
                f"  output_dir={self.output_dir},\n"
                f"  log_level={self.log_level},\n"
                f"  log_file={self.log_file},\n"
                f"  attributes={self.attributes},\n"
                f"  exporters={self.exporters}\n"
                f")")
