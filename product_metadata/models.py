import math
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ExtractionResult:
    """Best-effort product metadata for one URL.

    Every data field is independently optional. A failed result never
    carries data.
    """

    title: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    success: bool = False

    def __post_init__(self):
        if not self.success and any(
            value is not None for value in (self.title, self.image_url, self.price, self.description)
        ):
            raise ValueError('A failed extraction cannot carry metadata')
        if self.price is not None and self.price < 0:
            raise ValueError('price must be non-negative')

    @classmethod
    def failed(cls) -> 'ExtractionResult':
        return cls(success=False)

    @classmethod
    def from_metadata(cls, data: Any, success: bool = True) -> 'ExtractionResult':
        """Decode the ``metadata`` object of an API response, dropping bad values."""
        if not success or not isinstance(data, dict):
            return cls.failed()

        def text(key):
            value = data.get(key)
            return value if isinstance(value, str) and value else None

        price = data.get('price')
        if (isinstance(price, bool) or not isinstance(price, (int, float))
                or not math.isfinite(price) or price < 0):
            price = None
        return cls(
            title=text('title'),
            image_url=text('imageUrl'),
            price=float(price) if price is not None else None,
            description=text('description'),
            success=True,
        )

    def metadata(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'imageUrl': self.image_url,
            'price': self.price,
            'description': self.description,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {'success': self.success, 'metadata': self.metadata()}
