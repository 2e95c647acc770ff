"""
Sign vocabulary storage and its JSON encoding.
"""
import logging
import threading
from typing import List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import IndexOutOfRange, PersistenceCorrupt
from .types import PersistenceProto, Point3, SignRecord

logger = logging.getLogger(__name__)

# Ordered, immutable view of every stored sign
SignVocabulary = Tuple[SignRecord, ...]


class LandmarkModel(BaseModel):
    """Wire format of a single landmark."""
    # NaN and Infinity would be written back as null
    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    z: float


class SignRecordModel(BaseModel):
    """Wire format of a stored sign."""
    name: str
    landmarks: List[LandmarkModel]
    # Older saves call the thumbnail "image"
    thumbnail: Optional[str] = Field(default=None, validation_alias=AliasChoices("thumbnail", "image"))

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("sign name must not be blank")
        return value

    @classmethod
    def from_record(cls, record: SignRecord) -> "SignRecordModel":
        return cls(
            name=record.name,
            landmarks=[LandmarkModel(x=p.x, y=p.y, z=p.z) for p in record.landmarks],
            thumbnail=record.thumbnail,
        )

    def to_record(self) -> SignRecord:
        return SignRecord(
            name=self.name,
            landmarks=tuple(Point3(lm.x, lm.y, lm.z) for lm in self.landmarks),
            thumbnail=self.thumbnail,
        )


_vocabulary_adapter = TypeAdapter(List[SignRecordModel])


def encode_vocabulary(vocabulary: SignVocabulary) -> bytes:
    """Serialize a vocabulary to UTF-8 JSON, preserving order."""
    models = [SignRecordModel.from_record(record) for record in vocabulary]
    return _vocabulary_adapter.dump_json(models)


def decode_vocabulary(data: bytes) -> SignVocabulary:
    """
    Parse a vocabulary previously produced by encode_vocabulary.

    Raises:
        PersistenceCorrupt: if the data is not valid JSON of the expected shape
    """
    try:
        models = _vocabulary_adapter.validate_json(data)
    except ValidationError as e:
        raise PersistenceCorrupt(f"Stored vocabulary is unreadable: {e.error_count()} error(s)") from e
    return tuple(model.to_record() for model in models)


class SignStore:
    """
    Ordered collection of named signs backed by a persistence collaborator.

    The vocabulary is held as an immutable tuple that is replaced, never
    modified, so snapshot() always returns a consistent view even while
    another thread adds or removes signs. Every mutation rewrites the full
    persisted vocabulary.
    """

    def __init__(self, backend: PersistenceProto):
        self.backend = backend
        self._signs: SignVocabulary = ()
        self._lock = threading.Lock()

    def load(self) -> SignVocabulary:
        """
        Load the persisted vocabulary, replacing whatever is in memory.

        Missing data yields an empty vocabulary; corrupt data is discarded
        (logged, not repaired) and also yields an empty vocabulary.
        """
        data = self.backend.load_vocabulary()
        signs: SignVocabulary = ()
        if data:
            try:
                signs = decode_vocabulary(data)
            except PersistenceCorrupt as e:
                logger.warning(f"Discarding corrupt sign vocabulary: {e}")
        with self._lock:
            self._signs = signs
        logger.info(f"Loaded {len(signs)} sign(s)")
        return signs

    def snapshot(self) -> SignVocabulary:
        """Current vocabulary in insertion order."""
        return self._signs

    def __len__(self) -> int:
        return len(self._signs)

    def __getitem__(self, index: int) -> SignRecord:
        signs = self._signs
        if not 0 <= index < len(signs):
            raise IndexOutOfRange(index, len(signs))
        return signs[index]

    def add(self, record: SignRecord) -> None:
        """Append a sign and persist. Duplicate names are allowed."""
        with self._lock:
            signs = self._signs + (record,)
            self._persist(signs)
        logger.info(f"Added sign '{record.name}' ({len(signs)} total)")

    def remove(self, index: int) -> SignRecord:
        """
        Remove the sign at index and persist; later signs shift down by one.

        Raises:
            IndexOutOfRange: if index is not a valid position (nothing changes)
        """
        with self._lock:
            signs = self._signs
            if not 0 <= index < len(signs):
                raise IndexOutOfRange(index, len(signs))
            removed = signs[index]
            self._persist(signs[:index] + signs[index + 1:])
        logger.info(f"Removed sign '{removed.name}' at index {index}")
        return removed

    def clear(self) -> None:
        """Remove every sign and persist the empty vocabulary."""
        with self._lock:
            self._persist(())
        logger.info("Cleared all signs")

    def _persist(self, signs: SignVocabulary) -> None:
        # Write first so a failed save leaves memory and storage in agreement
        self.backend.save_vocabulary(encode_vocabulary(signs))
        self._signs = signs
