from .validation_entry import GUID, HistoryPointer, ValidationEntry

__all__ = ["GUID", "HistoryPointer", "ValidationEntry"]
