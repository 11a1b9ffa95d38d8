"""Attribute and process data sets; importing this package registers the built-in attributes."""

from .attribute_data_set import AttributeDataSet, attribute_registry
from .cpu_data_set import ProcessCPUDataSet
from .memory_data_set import ProcessMemoryDataSet
from .process_data_set import ProcessDataSet

__all__ = [
    "AttributeDataSet",
    "attribute_registry",
    "ProcessCPUDataSet",
    "ProcessMemoryDataSet",
    "ProcessDataSet",
]
