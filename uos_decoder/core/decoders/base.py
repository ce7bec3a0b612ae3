from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BaseDecoder(ABC):
    @abstractmethod
    def decode(self, data):
        """Decode the data of this layer and return its result"""
        pass

    def describe(self, result) -> List[Dict[str, Any]]:
        """Return display items for a result produced by `decode`"""
        return []

    @staticmethod
    def make_item(name: str, value: Any, type_name: str,
                  offset: Optional[int] = None, length: Optional[int] = None) -> Dict[str, Any]:
        item = {'name': name, 'value': value, 'type': type_name}
        if offset is not None:
            item['offset'] = hex(offset)
        if length is not None:
            item['length'] = str(length)
        return item
