# finance_tracker/loaders/base.py
from abc import ABC, abstractmethod

class BaseLoader(ABC):
    @abstractmethod
    def load(self, file_path: str):
        """
        Yield TransactionInput instances from file_path.
        """
        pass
