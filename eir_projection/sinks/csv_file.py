"""CSV file sink for projection records."""

import csv
from pathlib import Path

from eir_projection.exceptions import SinkError
from eir_projection.models import ProjectionRecord
from eir_projection.sinks.serialization import OUTPUT_HEADERS, record_to_row


class CsvFileSink:
    """Output projection records to CSV files with spreadsheet headers."""

    def __init__(self, output_dir: str | Path, date_format: str = "%d/%m/%Y") -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.date_format = date_format
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[ProjectionRecord]) -> None:
        """Write records to ``<entity_type>.csv``."""
        file_path = self.output_dir / f"{entity_type}.csv"
        try:
            with open(file_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(OUTPUT_HEADERS)
                for record in records:
                    writer.writerow(record_to_row(record, self.date_format))
        except OSError as e:
            raise SinkError(f"Failed to write {file_path}: {e}") from e

        self._counts[entity_type] = len(records)

    def close(self) -> None:
        """Print summary."""
        print(f"CSV files written to: {self.output_dir}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
