"""Infrastructure layer package."""

from .csv_repository import FileError, UploadResult, load_report, load_reports
from .excel_repository import save_output_workbook, write_output_excel
from .reference_repository import load_reference_tables
from .report_exporter import (
    creatives_csv,
    records_csv,
    save_creatives_export,
    save_records_export,
    save_summary_json,
)

__all__ = [
    "FileError",
    "UploadResult",
    "load_report",
    "load_reports",
    "save_output_workbook",
    "write_output_excel",
    "load_reference_tables",
    "creatives_csv",
    "records_csv",
    "save_creatives_export",
    "save_records_export",
    "save_summary_json",
]
