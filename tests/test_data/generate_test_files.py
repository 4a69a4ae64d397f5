"""
Generate synthetic quote workbooks for testing spreadsheet ingestion.
"""
import sys
from pathlib import Path

from openpyxl import Workbook

OUTPUT_DIR = Path(__file__).parent


def _write_rows(ws, rows):
    for row in rows:
        ws.append(list(row))


def create_multi_group_quote():
    """Quote Info + two banner groups (with noise) + cost items."""
    wb = Workbook()

    ws = wb.active
    ws.title = "Quote Info"
    _write_rows(ws, [
        ["Field", "Value", "Description"],
        ["Quote Subject", "Branch Office Refresh", "Brief description of the quote"],
        ["Customer Company", "Northwind Traders", "Customer company name"],
        ["Sales Person Name", "Dana Whitfield", "Name of the sales representative"],
        ["Date", "2024-03-15", "Quote date (YYYY-MM-DD)"],
        ["Version", 2, "Quote version number"],
        ["Payment Terms", None, "Payment terms for the quote"],
        ["Currency", "EUR", "Currency for all prices"],
        ["BOM Enabled", "TRUE", "Enable BOM section (TRUE/FALSE)"],
        ["Costs Enabled", "no", "Enable costs section (TRUE/FALSE)"],
    ])

    ws = wb.create_sheet("BOM Items (Multi-Group)")
    _write_rows(ws, [
        ["📋 BOM TEMPLATE INSTRUCTIONS"],
        ["HOW TO USE: copy the rows of one group"],
        [],
        ["📦 GROUP 1: Network Infrastructure"],
        ["Part Number", "Product Description", "QTY", "Unit Price"],
        ["C9300-48P", "Catalyst 9300 48-port PoE+ Switch", 2, 2500],
        ["PWR-C1-715WAC", "Power Supply 715W AC", 2, 400],
        [],
        ["C9300-NM-8X", "Network Module 8x10G", 1, 1200],
        [],
        ["📦 GROUP 2: Cables & Accessories"],
        [],
        ["Part Number", "Product Description", "QTY", "Unit Price"],
        ["CAB-C13-C14-2M", "Power Cable 2M", 4, 25],
        ["Part Number", "Product Description", "QTY", "Unit Price"],
        ["CAB-ETH-S-RJ45", "Ethernet Cable 1M", 8, 15],
        ["RACK-MOUNT-KIT", "Rack Mount Kit", 1, 75],
        ["Total:", None, None, 2815],
    ])

    ws = wb.create_sheet("Cost Items")
    _write_rows(ws, [
        ["Product Description", "QTY", "Unit Price", "Total Price", "Is Discount"],
        ["Description of service or product", "Quantity", "Price per unit", "Total amount", "TRUE for discounts"],
        ["Installation Services", 1, 500, 500, "FALSE"],
        ["Project Management", 2, 250, 500, "FALSE"],
        ["Volume Discount", 1, -100, -100, "TRUE"],
    ])

    wb.save(OUTPUT_DIR / "multi_group_quote.xlsx")


def create_single_sheet_bom():
    """One unrecognised sheet holding a flat BOM."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    _write_rows(ws, [
        ["Part Number", "Product Description", "QTY", "Unit Price"],
        ["FIREWALL-60F", "FortiGate 60F Firewall", 1, 800],
        ["UPS-1500VA", "UPS 1500VA Battery Backup", 2, 350],
        ["SENSOR-ENV", "Environmental Sensor", 4, 120],
    ])
    wb.save(OUTPUT_DIR / "single_sheet_bom.xlsx")


def create_messy_bom():
    """Title block, notes, bad quantities and rows without identifiers."""
    wb = Workbook()
    ws = wb.active
    ws.title = "BOM"
    _write_rows(ws, [
        ["Acme Networks - Equipment List"],
        ["Prepared for internal review"],
        [],
        ["No.", "Part Number", "Product Description", "QTY"],
        [1, "AP-515", "Wireless Access Point", 10],
        [2, "AP-MNT", "Ceiling Mount Bracket", "abc"],
        [3, "LIC-AP-1Y", "Access Point License 1 Year", -5],
        ["x", "SW-24", "24-port Access Switch", 0],
        [5, None, None, 3],
        ["Note: pricing to follow"],
        [6, "PSU-RED", "Redundant Power Supply", 2.7],
    ])
    wb.save(OUTPUT_DIR / "messy_bom.xlsx")


def create_headerless_bom():
    """A BOM sheet with no recognisable header anywhere."""
    wb = Workbook()
    ws = wb.active
    ws.title = "BOM Items"
    _write_rows(ws, [
        ["Item", "Details", "Count"],
        ["AP-515", "Wireless Access Point", 10],
        ["AP-MNT", "Ceiling Mount Bracket", 10],
    ])
    wb.save(OUTPUT_DIR / "headerless_bom.xlsx")


def main() -> int:
    create_multi_group_quote()
    create_single_sheet_bom()
    create_messy_bom()
    create_headerless_bom()
    print(f"Test workbooks written to {OUTPUT_DIR}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
