from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Union

from docscanner.errors import UnknownDocumentTypeError


PASSPORT_ASPECT_RATIO = 1.4  # 125mm x 88mm
CARD_ASPECT_RATIO = 1.6      # 85mm x 54mm


@dataclass(frozen=True)
class DocumentType:
    """A kind of document the scanner can capture."""
    id: str
    name: str
    is_passport_type: bool

    @property
    def aspect_ratio(self) -> float:
        return PASSPORT_ASPECT_RATIO if self.is_passport_type else CARD_ASPECT_RATIO


DEFAULT_DOCUMENT_TYPES = (
    DocumentType("01", "Domestic passport", True),
    DocumentType("10", "Overseas passport", True),
    DocumentType("02", "National ID card", False),
    DocumentType("03", "Driver's license", False),
    DocumentType("04", "Credit card", False),
)


class DocumentTypeRegistry:
    """
    Read-only lookup table of the document types offered to the user.
    Built once and handed to the coordinator; entries keep their given order.
    """

    def __init__(self, document_types: Iterable[DocumentType] = DEFAULT_DOCUMENT_TYPES):
        types = tuple(document_types)
        if not types:
            raise ValueError("Registry needs at least one document type")

        by_id: Dict[str, DocumentType] = {}
        for doc_type in types:
            if doc_type.id in by_id:
                raise ValueError(f"Duplicate document type id '{doc_type.id}'")
            by_id[doc_type.id] = doc_type

        self._types = types
        self._by_id = by_id

    @classmethod
    def from_config(cls, entries: List[dict]) -> "DocumentTypeRegistry":
        """Build a registry from dicts with id / name / is_passport_type keys."""
        return cls(
            DocumentType(
                id=str(entry["id"]),
                name=str(entry.get("name", entry["id"])),
                is_passport_type=bool(entry.get("is_passport_type", False)),
            )
            for entry in entries
        )

    @property
    def default(self) -> DocumentType:
        return self._types[0]

    def get(self, document_type_id: str) -> DocumentType:
        try:
            return self._by_id[document_type_id]
        except KeyError:
            raise UnknownDocumentTypeError(document_type_id) from None

    def resolve(self, document_type: Union[str, DocumentType]) -> DocumentType:
        """Accept an id or a DocumentType; the latter must be registered."""
        doc_id = document_type.id if isinstance(document_type, DocumentType) else document_type
        return self.get(doc_id)

    def __contains__(self, document_type_id) -> bool:
        return document_type_id in self._by_id

    def __iter__(self) -> Iterator[DocumentType]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)
