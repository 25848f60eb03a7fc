"""Output sinks for exporting projections."""

from eir_projection.sinks.console import ConsoleSink
from eir_projection.sinks.csv_file import CsvFileSink
from eir_projection.sinks.excel import ExcelWorkbookSink, safe_sheet_name, write_input_template
from eir_projection.sinks.json_file import JsonFileSink

__all__ = [
    "ConsoleSink",
    "CsvFileSink",
    "ExcelWorkbookSink",
    "JsonFileSink",
    "safe_sheet_name",
    "write_input_template",
]
