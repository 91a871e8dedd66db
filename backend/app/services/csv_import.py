"""Generic CSV bulk import: Parse -> Validate -> Convert -> BatchUpsert.

Input-level problems (empty file, missing required columns, bad cells) abort
before any write. Once writing starts, each row is upserted and committed on
its own; a failing row is rolled back, reported as ``"<Label> <id>: <msg>"``
and the batch carries on.
"""
import csv
import io
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.user import ROLES
from app.services.entity_store import EntityStore

logger = logging.getLogger(__name__)

# Header names (as exported by the UI) whose cells must parse as dates
DATE_FIELDS = (
    "purchaseDate",
    "warrantyStart",
    "warrantyEnd",
    "warrantyExpiry",
    "contractStartDate",
    "contractEndDate",
    "scheduledDate",
    "completedDate",
    "dueDate",
)

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d")


# ─── Errors ───

class MalformedInputError(ValueError):
    """The upload could not be split into at least a header row."""


class ImportValidationError(ValueError):
    """Required columns or cells are missing/invalid; carries every violation."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


# ─── Data shapes ───

@dataclass
class CsvRow:
    number: int  # 1-based line in the file; the header is line 1
    cells: list[str]


@dataclass
class ParsedCsv:
    header: list[str]
    rows: list[CsvRow]


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class ImportOutcome:
    created: int = 0  # successful upserts, inserts and updates alike
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImportSpec:
    """Per-entity configuration for the generic pipeline."""

    entity_kind: str
    entity_label: str
    entity_plural: str
    model: Any
    prefix: str
    required_fields: tuple[str, ...]
    row_to_record: Callable[[dict[str, str]], dict[str, Any]]
    identifier_field: str = "id"
    create_defaults: Callable[[], dict[str, Any]] | None = None


# ─── Cell converters (used by row_to_record functions) ───

def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_date(value: str | None) -> date | None:
    value = blank_to_none(value)
    if value is None:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise ValueError(f"Invalid date: '{value}'") from None


def parse_decimal(value: str | None) -> Decimal | None:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"Invalid number: '{value}'") from None


def parse_int(value: str | None) -> int | None:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer: '{value}'") from None


# ─── Parse ───

def parse_csv(text: str) -> ParsedCsv:
    """Split CSV text into a header and data rows; blank lines are dropped, cells stripped.

    Row numbers count non-blank records with the header as row 1, so a quoted
    cell spanning several lines is still one row.
    """
    reader = csv.reader(io.StringIO(text))
    rows: list[CsvRow] = []
    try:
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            rows.append(CsvRow(number=len(rows) + 1, cells=[cell.strip() for cell in cells]))
    except csv.Error as exc:
        raise MalformedInputError(f"Could not parse CSV (line {reader.line_num}): {exc}") from exc
    if not rows:
        raise MalformedInputError("CSV file is empty")
    return ParsedCsv(header=rows[0].cells, rows=rows[1:])


# ─── Validate ───

def _email_rule(row: CsvRow, index: dict[str, int]) -> list[str]:
    i = index.get("email")
    if i is None or not row.cells[i]:
        return []
    # Same check as EmailStr in the API schemas
    try:
        validate_email(row.cells[i], check_deliverability=False)
    except EmailNotValidError:
        return [f"Row {row.number}: Invalid email format"]
    return []


def _role_rule(row: CsvRow, index: dict[str, int]) -> list[str]:
    i = index.get("role")
    if i is not None and row.cells[i] and row.cells[i].lower() not in ROLES:
        return [f"Row {row.number}: Invalid role. Must be one of {', '.join(ROLES)}"]
    return []


def _date_rule(row: CsvRow, index: dict[str, int]) -> list[str]:
    errors = []
    for name in DATE_FIELDS:
        i = index.get(name)
        if i is None or not row.cells[i]:
            continue
        try:
            parse_date(row.cells[i])
        except ValueError:
            errors.append(f"Row {row.number}: Invalid date format for {name}")
    return errors


ENTITY_RULES: dict[str, tuple[Callable[[CsvRow, dict[str, int]], list[str]], ...]] = {
    "users": (_email_rule, _role_rule),
    "customers": (_email_rule,),
}


def validate_rows(
    parsed: ParsedCsv,
    required_fields: tuple[str, ...] | list[str],
    entity_kind: str,
    max_errors: int | None = None,
) -> ValidationResult:
    """Check required columns, required cells and entity rules.

    All violations are collected (no short-circuit) and truncated to
    ``max_errors`` (default ``IMPORT_MAX_ERRORS``) for display.
    """
    limit = max_errors if max_errors is not None else settings.IMPORT_MAX_ERRORS
    errors: list[str] = []
    header = parsed.header

    missing = [name for name in required_fields if name not in header]
    if missing:
        errors.append(f"Missing required columns: {', '.join(missing)}")

    index: dict[str, int] = {}
    for i, name in enumerate(header):
        index.setdefault(name, i)

    rules = ENTITY_RULES.get(entity_kind, ()) + (_date_rule,)
    for row in parsed.rows:
        if len(row.cells) != len(header):
            errors.append(f"Row {row.number}: Column count mismatch")
            continue
        for name in required_fields:
            i = index.get(name)
            if i is not None and not row.cells[i]:
                errors.append(f"Row {row.number}: {name} is required")
        for rule in rules:
            errors.extend(rule(row, index))

    return ValidationResult(is_valid=not errors, errors=errors[:limit])


# ─── Convert ───

def rows_to_records(parsed: ParsedCsv) -> list[dict[str, str]]:
    """Zip each data row against the header; values stay strings."""
    return [
        {name: (row.cells[i] if i < len(row.cells) else "") for i, name in enumerate(parsed.header)}
        for row in parsed.rows
    ]


# ─── BatchUpsert ───

def _error_message(exc: Exception) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        lines = str(exc.orig).strip().splitlines()
        if lines:
            return lines[0]
    return str(exc)


async def batch_upsert(
    db: AsyncSession,
    spec: ImportSpec,
    records: list[dict[str, str]],
    store: EntityStore | None = None,
) -> ImportOutcome:
    """Upsert each record in file order; per-row failures are recorded, never raised."""
    store = store or EntityStore(db, spec.model, spec.prefix)
    outcome = ImportOutcome()

    for record in records:
        identifier = record.get(spec.identifier_field, "")
        try:
            fields = spec.row_to_record(record)
            await store.upsert(identifier, fields, create_defaults=spec.create_defaults)
        except (SQLAlchemyError, ValueError) as exc:
            await db.rollback()
            message = _error_message(exc)
            logger.warning("Import row failed: %s %s: %s", spec.entity_label, identifier, message)
            outcome.errors.append(f"{spec.entity_label} {identifier}: {message}")
            continue
        outcome.created += 1

    logger.info(
        "Imported %d %s (%d errors)", outcome.created, spec.entity_plural, len(outcome.errors)
    )
    return outcome


# ─── Pipeline ───

def decode_upload(content: bytes) -> str:
    return content.decode("utf-8-sig", errors="replace")


async def run_import(db: AsyncSession, spec: ImportSpec, text: str) -> ImportOutcome:
    """Full pipeline. Raises MalformedInputError / ImportValidationError before any write."""
    parsed = parse_csv(text)

    if len(parsed.rows) > settings.IMPORT_MAX_ROWS:
        raise ImportValidationError(
            [f"File has {len(parsed.rows)} data rows; the limit is {settings.IMPORT_MAX_ROWS}"]
        )

    validation = validate_rows(parsed, spec.required_fields, spec.entity_kind)
    if not validation.is_valid:
        raise ImportValidationError(validation.errors)

    records = rows_to_records(parsed)
    return await batch_upsert(db, spec, records)
