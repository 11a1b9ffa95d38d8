from typing import Optional

import psutil

from procwatch.consts.AttributeType import AttributeType
from procwatch.service.monitor.process_source import ProcessSource
from .attribute_data_set import AttributeDataSet, attribute_registry


@attribute_registry.register(AttributeType.CPU_PERCENT.value)
class ProcessCPUDataSet(AttributeDataSet):
    """
    CPU utilization in percent of one core, computed from the CPU time used
    between two samples. The first sample of an instance reports 0.0.
    """

    name = AttributeType.CPU_PERCENT.value

    def __init__(self, source: Optional[ProcessSource] = None, cpu_count: Optional[int] = None) -> None:
        super().__init__(source)
        self.cpu_count = cpu_count or psutil.cpu_count() or 1
        self._prev_cpu_time: Optional[float] = None
        self._prev_wall_time: Optional[float] = None

    @property
    def max_percent(self) -> float:
        return self.cpu_count * 100.0

    def _sample(self, process: psutil.Process, now: float) -> float:
        cpu_time = self.source.cpu_time(process)
        prev_cpu_time, prev_wall_time = self._prev_cpu_time, self._prev_wall_time
        self._prev_cpu_time = cpu_time
        self._prev_wall_time = now

        if prev_cpu_time is None or prev_wall_time is None:
            return 0.0

        elapsed = now - prev_wall_time
        if elapsed <= 0:
            return 0.0

        percent = (cpu_time - prev_cpu_time) / elapsed * 100.0
        return min(max(percent, 0.0), self.max_percent)
