# finance_tracker/outputs/base.py
from abc import ABC, abstractmethod

class BaseOutput(ABC):
    @abstractmethod
    def write(self, report):
        """Write a Report to the chosen sink and return the path written."""
        pass
