"""Loader for the desired-entry list (domains.csv)."""

import csv
from collections.abc import Iterable
from pathlib import Path

from dreamdns.errors import DesiredListInvalid, DesiredListMissing, UnsupportedRecordType
from dreamdns.models import DesiredEntry, RecordType

SUPPORTED_TYPES = frozenset(record_type.value for record_type in RecordType)


def parse_desired_entries(lines: Iterable[str]) -> list[DesiredEntry]:
    """Parse ``TYPE,HOSTNAME`` rows into desired entries.

    The whole input is validated before anything is returned, so a bad row
    anywhere aborts the run before a single API call is spent.

    Raises:
        UnsupportedRecordType: On the first row with an unknown type
        DesiredListInvalid: On a row without a hostname
    """
    entries = []
    for line_no, row in enumerate(csv.reader(lines), start=1):
        cells = [cell.strip() for cell in row]
        if not cells or not any(cells) or cells[0].startswith("#"):
            continue

        record_type = cells[0]
        hostname = cells[1] if len(cells) > 1 else ""

        if record_type not in SUPPORTED_TYPES:
            raise UnsupportedRecordType(record_type, hostname)
        if not hostname:
            raise DesiredListInvalid(line_no, ",".join(row))

        entries.append(DesiredEntry(type=RecordType(record_type), hostname=hostname))

    return entries


def load_desired_entries(path: Path) -> list[DesiredEntry]:
    """Load and validate the desired-entry list from a CSV file."""
    if not path.is_file():
        raise DesiredListMissing(path)

    with open(path, newline="") as f:
        return parse_desired_entries(f)
