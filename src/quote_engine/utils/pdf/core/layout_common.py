"""
Layout and style constants for quote rendering (points, top-left origin).
"""

# Page geometry (A4, points)
PAGE_W, PAGE_H = 595, 842
MARGIN = 50

# Branding header
HEADER_TOP = 45
LOGO_WIDTH = 100
COMPANY_X = 250
COMPANY_NAME_SIZE = 16
CONTACT_SIZE = 10

# Title band
TITLE_SIZE = 24
TITLE_GAP = 40

# Quote-to / details boxes
BOX_HEIGHT = 100
CLIENT_BOX = (50, 250)  # x, width
DETAILS_BOX = (320, 225)
BOX_PADDING = 10
BOX_HEADER_GAP = 20
QR_SIZE = 60

# Items table
TABLE_X = 50
TABLE_W = 495
TABLE_TEXT_X = 60
TABLE_HEADER_HEIGHT = 20
TABLE_HEADERS = ("Product", "Description", "Quantity", "Unit Price", "Total")
COLUMN_WIDTHS = (150, 140, 60, 70, 75)
ROW_PADDING = 10
TABLE_GAP = 30

# Summary box
SUMMARY_X, SUMMARY_W, SUMMARY_H = 320, 225, 120
SUMMARY_GAP = 20
SUMMARY_ROW = 20

# Text
BODY_SIZE = 10
SECTION_TITLE_SIZE = 14
SMALL_SIZE = 8
SIGNATURE_WIDTH = 200

# Colors (RGB components in 0-1 space encoded as strings for PDF ops)
COLORS = {
    "black": "0 0 0",
    "header_bg": "0.953 0.957 0.965",  # #f3f4f6
    "header_border": "0.898 0.906 0.922",  # #e5e7eb
    "row_alt": "0.973 0.980 0.988",  # #f8fafc
    "border": "0 0 0",
    "muted": "0.4 0.4 0.4",  # #666666
}


def color(name: str) -> str:
    """Resolve a palette name, `#rrggbb` hex or a raw `r g b` string."""
    if name in COLORS:
        return COLORS[name]
    if name.startswith("#") and len(name) == 7:
        r, g, b = (int(name[i : i + 2], 16) / 255 for i in (1, 3, 5))
        return f"{r:.3f} {g:.3f} {b:.3f}"
    return name
