# inspection/context.py

from dataclasses import dataclass

from data_detective.domain.source_map import SourceMapper
from data_detective.schemas import FileType

from .documents import DocumentError, ParsedDocument, Record
from .models import AnalysisSettings, Location, Unlocatable


@dataclass(frozen=True)
class AnalysisContext:
    """
    Everything one inspection call works from, built fresh for every call.

    Exactly one of ``document`` and ``load_error`` is set, except for XML,
    which always loads as an empty document.
    """

    content: str
    file_name: str
    file_type: FileType
    settings: AnalysisSettings
    mapper: SourceMapper
    document: ParsedDocument | None = None
    load_error: DocumentError | None = None

    @property
    def records(self) -> tuple[Record, ...]:
        return self.document.records if self.document else ()

    def locate(self, record_index: int, field_name: str | None = None) -> Location:
        """
        Resolve the source position of a record field.

        Args:
            record_index: Zero-based index of the record.
            field_name: Field within the record; None locates the record.

        Returns:
            Location: The exact span when known, otherwise a row-only fallback.
        """
        if self.document is None:
            return Unlocatable(None, "document could not be loaded")
        return self.document.locations.locate(record_index, field_name)
