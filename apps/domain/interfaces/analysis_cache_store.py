from abc import ABC, abstractmethod
from typing import Dict, Optional


class AnalysisCacheStore(ABC):
    backend_name = 'unknown'

    @abstractmethod
    def get(self, key: str) -> Optional[Dict]:
        """Return the stored analysis, or None on a miss, an expired entry or a backend failure."""
        pass

    @abstractmethod
    def set(self, key: str, value: Dict, ttl: int) -> None:
        """Store an analysis for ttl seconds. Failures are logged, never raised."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass
