"""Core (UI-agnostic) dashboard logic.

This package contains:
- cell coercion (amounts, spreadsheet dates)
- workbook loading (XLSX -> pandas) and date-range filtering
- the join-and-aggregate summary (JSON-serializable payload)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
