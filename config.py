"""
Foreclosure Case Manager Configuration
"""
import os
from pathlib import Path

# Load environment variables from .env file
from dotenv import dotenv_values

_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    _env_values = dotenv_values(_env_path)
    for key, value in _env_values.items():
        if value and not os.environ.get(key):  # Set if value exists and env not already set
            os.environ[key] = value

# Base paths
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("CASE_DATA_DIR", BASE_DIR / "data"))
TEMPLATES_DIR = Path(os.getenv("CASE_TEMPLATES_DIR", DATA_DIR / "templates"))
EXPORTS_DIR = DATA_DIR / "exports"

# Value formatting (see formatters.Formatter)
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "")
GROUPING_SEPARATOR = os.getenv("GROUPING_SEPARATOR", ",")
DECIMAL_SEPARATOR = os.getenv("DECIMAL_SEPARATOR", ".")
MAX_DECIMALS = int(os.getenv("MAX_DECIMALS", "3"))
MISSING_VALUE = "N/A"

# PDF page layout, in points (1/72 inch). Letter paper, 1 inch margins.
PAGE_WIDTH = float(os.getenv("PDF_PAGE_WIDTH", "612"))
PAGE_HEIGHT = float(os.getenv("PDF_PAGE_HEIGHT", "792"))
PAGE_MARGIN = float(os.getenv("PDF_PAGE_MARGIN", "72"))
LINE_HEIGHT = float(os.getenv("PDF_LINE_HEIGHT", "16"))
BLANK_LINE_HEIGHT = float(os.getenv("PDF_BLANK_LINE_HEIGHT", "8"))
DEFAULT_FONT = os.getenv("PDF_DEFAULT_FONT", "Helvetica")
DEFAULT_FONT_SIZE = int(os.getenv("PDF_DEFAULT_FONT_SIZE", "12"))

# Document editor
DEFAULT_DOCUMENT_CONTENT = "<p>Enter your document content here...</p>"
