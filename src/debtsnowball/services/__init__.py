"""Service module exports."""

from . import export_csv, import_csv, reports, snowball

__all__ = [
    "export_csv",
    "import_csv",
    "reports",
    "snowball",
]
