import psutil

from procwatch.consts.AttributeType import AttributeType
from .attribute_data_set import AttributeDataSet, attribute_registry


@attribute_registry.register(AttributeType.MEMORY_BYTES.value)
class ProcessMemoryDataSet(AttributeDataSet):
    """Resident memory (RSS) in bytes; no state between samples."""

    name = AttributeType.MEMORY_BYTES.value

    def _sample(self, process: psutil.Process, now: float) -> float:
        return float(self.source.memory_usage(process))
