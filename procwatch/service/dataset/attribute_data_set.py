from abc import ABC, abstractmethod
from typing import Optional

import psutil

from procwatch.service.monitor.process_source import ProcessSource
from procwatch.util.log_config import setup_logger
from procwatch.util.registry import Registry

logger = setup_logger(__name__)


class AttributeDataSet(ABC):
    """Abstract sampler for one metric family of one process.

    Subclasses set ``name`` (the column label) and implement ``_sample``.
    Use super().__init__(...) in subclass constructors.
    """

    name: str = ""

    def __init__(self, source: Optional[ProcessSource] = None) -> None:
        self.source = source or ProcessSource()
        self._last_value: Optional[float] = None

    @property
    def last_value(self) -> Optional[float]:
        return self._last_value

    def record(self, process: psutil.Process, now: float) -> bool:
        """
        Sample one data point.

        Args:
            process: Target process handle
            now: Wall-clock time of this sample (epoch seconds)

        Returns:
            False if the process is gone or the metric couldn't be read
        """
        try:
            value = self._sample(process, now)
        except psutil.NoSuchProcess:
            logger.debug(f"{self.name}: process {process.pid} is gone")
            self._last_value = None
            return False
        except (psutil.Error, OSError) as e:
            logger.debug(f"{self.name}: sample failed for {process.pid}: {e}")
            self._last_value = None
            return False

        self._last_value = value
        return True

    @abstractmethod
    def _sample(self, process: psutil.Process, now: float) -> float:
        """Read the metric; psutil errors are handled by record()."""
        pass


attribute_registry: Registry[AttributeDataSet] = Registry("attribute data set")
