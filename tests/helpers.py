import pandas as pd

from core.data import load_records


BOOKING_HEADERS = ["Customer", "Region", "Product", "Booking_Amount", "Booking_Date"]
BILLING_HEADERS = ["Customer", "Region", "Product", "Billed_Amount", "Billing_Date"]
BACKLOG_HEADERS = ["Customer", "Region", "Product", "Backlog_Amount"]


def make_records(rows, dated=True):
    """
    Build typed records from dicts keyed by record field.

    Args:
        rows (list): Dicts with customer, region, product, amount and (when dated) date.
        dated (bool): False for backlog-shaped records.

    Returns:
        pandas.DataFrame: Records as the loader would produce them.
    """
    columns = ["customer", "region", "product", "amount"] + (["date"] if dated else [])
    return load_records(pd.DataFrame(rows, columns=columns), dated=dated)


def record(customer, region, product, amount, date=None):
    return {"customer": customer, "region": region, "product": product, "amount": amount, "date": date}


def write_workbook(path, bookings=(), billings=(), backlogs=(), sheets=("Bookings", "Billings", "Backlogs")):
    """
    Write a dashboard workbook with raw sheet headers.

    Rows are plain lists in header order; only the sheets named in ``sheets`` are written.
    """
    frames = {
        "Bookings": pd.DataFrame(list(bookings), columns=BOOKING_HEADERS),
        "Billings": pd.DataFrame(list(billings), columns=BILLING_HEADERS),
        "Backlogs": pd.DataFrame(list(backlogs), columns=BACKLOG_HEADERS),
    }
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name in sheets:
            frames[name].to_excel(writer, sheet_name=name, index=False)
    return path
