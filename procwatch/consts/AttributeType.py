from enum import Enum


class AttributeType(Enum):
    CPU_PERCENT = "cpu_percent"
    MEMORY_BYTES = "memory_bytes"
