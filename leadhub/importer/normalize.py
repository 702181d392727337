"""
Import normalizer — uploaded CSV / Excel file → uniform lead records.

Everything here is synchronous and side-effect free; the batch writer in
leadhub.importer.manager only ever sees the output of parse_upload().

Header matching is deliberately forgiving: admins export leads from all kinds
of tools, so "Company", "Website Name", "website_name" and "WEBSITE NAME " all
land on websiteName.
"""
import io
import logging
import math
import os
import re
from typing import Dict, List, Optional

from leadhub.config import BULK_IMPORT_DEFAULT_PRICE, DEFAULT_INDUSTRY
from leadhub.models.lead import LEAD_FIELDS

logger = logging.getLogger('importer.normalize')

DELIMITERS = (',', '\t', ';')

TEXT_EXTENSIONS = ('.csv', '.tsv', '.txt')
SPREADSHEET_EXTENSIONS = ('.xlsx', '.xls')


class ImportParseError(ValueError):
    """The uploaded file can't be turned into lead records. Raised before any write."""


# ── Header synonyms ──────────────────────────────────────────────────────────
# Keys are lowercased, trimmed header text. Every canonical field name maps to
# itself (lowercased) so normalize_header() is idempotent on its own output.

HEADER_SYNONYMS = {
    # websiteName
    'websitename': 'websiteName',
    'website name': 'websiteName',
    'website_name': 'websiteName',
    'site name': 'websiteName',
    'company name': 'websiteName',
    'company': 'websiteName',
    'business': 'websiteName',
    'business name': 'websiteName',
    'brand': 'websiteName',
    'store name': 'websiteName',
    # websiteUrl
    'websiteurl': 'websiteUrl',
    'website url': 'websiteUrl',
    'website_url': 'websiteUrl',
    'website': 'websiteUrl',
    'url': 'websiteUrl',
    'domain': 'websiteUrl',
    'site': 'websiteUrl',
    # firstName
    'firstname': 'firstName',
    'first name': 'firstName',
    'first_name': 'firstName',
    'first': 'firstName',
    'given name': 'firstName',
    'name': 'firstName',
    'contact name': 'firstName',
    # lastName
    'lastname': 'lastName',
    'last name': 'lastName',
    'last_name': 'lastName',
    'last': 'lastName',
    'surname': 'lastName',
    'family name': 'lastName',
    # jobTitle
    'jobtitle': 'jobTitle',
    'job title': 'jobTitle',
    'job_title': 'jobTitle',
    'title': 'jobTitle',
    'position': 'jobTitle',
    'role': 'jobTitle',
    # email
    'email': 'email',
    'e-mail': 'email',
    'email address': 'email',
    'mail': 'email',
    # socials
    'instagram': 'instagram',
    'ig': 'instagram',
    'insta': 'instagram',
    'instagram handle': 'instagram',
    'linkedin': 'linkedin',
    'linked in': 'linkedin',
    'linkedin url': 'linkedin',
    'tiktok': 'tiktok',
    'tik tok': 'tiktok',
    'tiktok handle': 'tiktok',
    # categorical
    'industry': 'industry',
    'niche': 'industry',
    'category': 'industry',
    'sector': 'industry',
    'location': 'location',
    'city': 'location',
    'country': 'location',
    'region': 'location',
    'founded': 'founded',
    'founded year': 'founded',
    'year founded': 'founded',
    # facebookPixel
    'facebookpixel': 'facebookPixel',
    'facebook pixel': 'facebookPixel',
    'facebook_pixel': 'facebookPixel',
    'facebook pixel status': 'facebookPixel',
    'fb pixel': 'facebookPixel',
    'fb pixel status': 'facebookPixel',
    'pixel': 'facebookPixel',
    # price
    'price': 'price',
    'cost': 'price',
    'rate': 'price',
    'lead price': 'price',
}

# Generic headers that only apply when no more specific column claims the field
LOW_PRIORITY_HEADERS = {
    'name', 'contact name', 'company', 'business', 'brand',
    'website', 'url', 'site', 'title', 'role', 'pixel',
}

# (required substrings, field), checked in order after an exact lookup misses
_HEURISTICS = [
    (('website', 'name'), 'websiteName'),
    (('website', 'url'), 'websiteUrl'),
    (('first', 'name'), 'firstName'),
    (('last', 'name'), 'lastName'),
    (('job', 'title'), 'jobTitle'),
    (('facebook', 'pixel'), 'facebookPixel'),
    (('fb', 'pixel'), 'facebookPixel'),
]

_NON_ALPHA = re.compile(r'[^a-z]')
_LINE_SPLIT = re.compile(r'\r?\n')
_PRICE_JUNK = re.compile(r'[$,]')


# ── Delimited text ───────────────────────────────────────────────────────────

def detect_delimiter(header_line: str) -> str:
    """
    Pick the candidate delimiter that splits the header line into the most fields.

    Ties go to the earlier candidate, so comma wins when nothing else beats it.
    This is a heuristic: a tab-separated file whose header happens to contain
    more commas than tabs will be read as comma-separated.
    """
    best, best_count = DELIMITERS[0], 0
    for candidate in DELIMITERS:
        count = len(header_line.split(candidate))
        if count > best_count:
            best, best_count = candidate, count
    return best


def parse_delimited_row(line: str, delimiter: str) -> List[str]:
    """Split one line into trimmed fields, honoring double-quoted fields and "" escapes."""
    values = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"' and i + 1 < len(line) and line[i + 1] == '"':
            current.append('"')
            i += 1
        elif char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            values.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append(''.join(current).strip())
    return values


# ── Headers ──────────────────────────────────────────────────────────────────

def normalize_header(raw_header: str) -> str:
    """
    Map a human-entered column header to a canonical lead field name.

    Order: exact synonym lookup (as typed, then letters-only), substring
    heuristics, then the letters-only header itself as a best-effort key.
    Keys that aren't lead fields are simply never read back out.
    """
    lower = (raw_header or '').lower().strip()
    if not lower:
        return ''

    if lower in HEADER_SYNONYMS:
        return HEADER_SYNONYMS[lower]

    compact = _NON_ALPHA.sub('', lower)
    if compact in HEADER_SYNONYMS:
        return HEADER_SYNONYMS[compact]

    for needles, field in _HEURISTICS:
        if all(needle in compact for needle in needles):
            return field

    return compact


def _header_priority(raw_header: str) -> int:
    lower = (raw_header or '').lower().strip()
    return 0 if lower in LOW_PRIORITY_HEADERS else 1


def normalize_headers(raw_headers: List[str]) -> List[str]:
    """
    Normalize a full header row, resolving columns that land on the same field.

    A generic header ("Name", "Company", "Website") never overrides a specific
    one ("First Name", ...) regardless of column order; between equals the
    leftmost column wins. Losing columns come back as '' and are dropped.
    """
    keys = [normalize_header(h) for h in raw_headers]
    winners = {}
    for idx, key in enumerate(keys):
        if not key:
            continue
        current = winners.get(key)
        if current is None or _header_priority(raw_headers[idx]) > _header_priority(raw_headers[current]):
            winners[key] = idx
    return [key if key and winners.get(key) == idx else '' for idx, key in enumerate(keys)]


def _zip_row(headers: List[str], values: List[str]) -> Dict[str, str]:
    row = {}
    for idx, key in enumerate(headers):
        if key:
            row[key] = values[idx] if idx < len(values) else ''
    return row


def parse_delimited_text(text: str) -> List[Dict[str, str]]:
    """Parse CSV / TSV / semicolon text into row dicts keyed by canonical field name."""
    lines = [line for line in _LINE_SPLIT.split(text or '') if line.strip()]
    if len(lines) < 2:
        raise ImportParseError('File is empty or missing data.')

    delimiter = detect_delimiter(lines[0])
    logger.info("Detected delimiter: %s", 'TAB' if delimiter == '\t' else delimiter)

    headers = normalize_headers(parse_delimited_row(lines[0], delimiter))
    return [_zip_row(headers, parse_delimited_row(line, delimiter)) for line in lines[1:]]


# ── Spreadsheets ─────────────────────────────────────────────────────────────

def read_workbook(data: bytes, filename: str = '') -> List[list]:
    """Decode the first sheet of an .xlsx / .xls file into raw cell rows."""
    import pandas as pd

    engine = 'xlrd' if filename.lower().endswith('.xls') else 'openpyxl'
    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, engine=engine)
    except Exception as e:
        logger.warning("Could not read workbook %s: %s", filename or '<upload>', e)
        raise ImportParseError(f'Could not read spreadsheet: {e}') from e
    return frame.values.tolist()


def _cell_to_str(value) -> str:
    if value is None:
        return ''
    if isinstance(value, float):
        if math.isnan(value):
            return ''
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def parse_spreadsheet(rows: List[list]) -> List[Dict[str, str]]:
    """
    Turn raw spreadsheet rows into row dicts keyed by canonical field name.

    The first row with any content is the header row; fully blank rows
    anywhere are skipped.
    """
    cleaned = [[_cell_to_str(cell) for cell in row] for row in rows or []]
    non_blank = [row for row in cleaned if any(row)]
    if not non_blank:
        raise ImportParseError('Spreadsheet is empty.')

    headers = normalize_headers(non_blank[0])
    data_rows = non_blank[1:]
    if not data_rows:
        raise ImportParseError('No data rows found after header.')

    return [_zip_row(headers, row) for row in data_rows]


# ── Records ──────────────────────────────────────────────────────────────────

def parse_price(value, default: float) -> float:
    """'$1,234.50' → 1234.5. Blank, unparseable, non-finite or negative → default."""
    if value is None:
        return default
    text = _PRICE_JUNK.sub('', str(value)).strip()
    if not text:
        return default
    try:
        price = float(text)
    except ValueError:
        return default
    if not math.isfinite(price) or price < 0:
        return default
    return price


def build_lead_record(row: Dict[str, str], default_price: float = BULK_IMPORT_DEFAULT_PRICE) -> Optional[Dict]:
    """
    Build a lead-shaped record from a normalized row, or None for a junk row.

    A row with no email, no first name and no website name carries nothing a
    buyer could use (typically trailing blank lines from spreadsheet exports).
    createdAt is left to the database so it is stamped at write time.
    """
    record = {field: (row.get(field) or '').strip() for field in LEAD_FIELDS}
    if not (record['email'] or record['firstName'] or record['websiteName']):
        return None

    record['industry'] = record['industry'] or DEFAULT_INDUSTRY
    record['price'] = parse_price(row.get('price'), default_price)
    record['status'] = 'available'
    return record


def parse_upload(filename: str, data: bytes) -> List[Dict]:
    """
    Parse an uploaded file into validated lead records.

    Raises ImportParseError for unsupported files, empty files, header-only
    files and files where every row is junk.
    """
    ext = os.path.splitext(filename or '')[1].lower()
    if ext in TEXT_EXTENSIONS:
        text = data.decode('utf-8-sig', errors='replace')
        rows = parse_delimited_text(text)
    elif ext in SPREADSHEET_EXTENSIONS:
        rows = parse_spreadsheet(read_workbook(data, filename))
    else:
        raise ImportParseError(f'Unsupported file type: {ext or "unknown"}. Upload a .csv, .xlsx or .xls file.')

    records = [rec for rec in (build_lead_record(row) for row in rows) if rec is not None]
    skipped = len(rows) - len(records)
    logger.info("Parsed %s: %d rows, %d valid, %d skipped", filename, len(rows), len(records), skipped)

    if not records:
        raise ImportParseError('No valid leads found in file.')
    return records
