"""
Centre catalog: read-only tuition centre reference data and offering ordering
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from flask import current_app

CONTACT_WHATSAPP = 'Whatsapp'
CONTACT_CALL = 'Call'
CONTACT_UNKNOWN = 'Unknown'

ALL_REVIEWS = 'all'

# Canonical ordering
LEVEL_ORDER = [
    'P1', 'P2', 'P3', 'P4', 'P5', 'P6',
    'S1', 'S2', 'S3', 'S4', 'S5',
    'JC1', 'JC2',
    'IB', 'Y5 (IB)', 'Y6 (IB)',
]

SUBJECT_ORDER = [
    'Biology', 'Chemistry', 'Physics', 'Science', 'Mathematics', 'Higher Chinese',
    'Chinese', 'English', 'Economics', 'History', 'Social Studies', 'Literature',
    'Geography', 'General Paper', 'POA', 'Malay', 'English Language & Linguistics',
    'English Language & Literature', 'China Studies in English',
]

LEVEL_GROUP_NAMES = {
    'P1': 'Primary 1', 'P2': 'Primary 2', 'P3': 'Primary 3',
    'P4': 'Primary 4', 'P5': 'Primary 5', 'P6': 'Primary 6',
    'S1': 'Secondary 1', 'S2': 'Secondary 2', 'S3': 'Secondary 3',
    'S4': 'Secondary 4', 'S5': 'Secondary 5',
    'JC1': 'JC 1', 'JC2': 'JC 2',
    'IB': 'IB', 'Y5 (IB)': 'Year 5 (IB)', 'Y6 (IB)': 'Year 6 (IB)',
}

_UNRANKED = 9999


@dataclass(frozen=True)
class Offering:
    level: str
    subject: str

    @property
    def key(self) -> str:
        return offering_key(self.level, self.subject)

    @property
    def label(self) -> str:
        return f"{self.level} {self.subject}"

    def as_dict(self) -> dict:
        return {'key': self.key, 'label': self.label, 'level': self.level, 'subject': self.subject}


@dataclass(frozen=True)
class Centre:
    centre_id: str
    name: str
    address: str = ''
    postal_code: str = ''
    contact_type: str = CONTACT_UNKNOWN
    contact_number: str = ''
    website_url: str = ''
    offerings: tuple[Offering, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        return {
            'centreId': self.centre_id,
            'name': self.name,
            'address': self.address,
            'postalCode': self.postal_code,
            'contactType': self.contact_type,
            'contactNumber': self.contact_number,
            'websiteUrl': self.website_url,
        }


def generate_centre_id(name: str) -> str:
    """Stable, URL-safe identifier derived from a centre name"""
    slug = re.sub(r'[^a-z0-9]+', '-', str(name or '').strip().lower())
    return slug.strip('-') or 'unknown'


def offering_key(level, subject) -> str:
    if not level and not subject:
        return ALL_REVIEWS
    return f"{level}__{subject}"


def _rank(value, order) -> int:
    try:
        return order.index(value)
    except ValueError:
        return _UNRANKED


def offering_sort_key(offering: Offering):
    # Canonical lists first, unknown values last by name; levels stay contiguous
    return (
        _rank(offering.level, LEVEL_ORDER),
        offering.level,
        _rank(offering.subject, SUBJECT_ORDER),
        offering.subject,
    )


def sort_offerings(offerings: Iterable[Offering]) -> list[Offering]:
    """Drop incomplete and duplicate offerings, then order level-major, subject-minor"""
    seen = set()
    items = []
    for offering in offerings:
        if not offering.level or not offering.subject:
            continue
        if offering.key in seen:
            continue
        seen.add(offering.key)
        items.append(offering)
    return sorted(items, key=offering_sort_key)


def group_offerings(sorted_offerings: Iterable[Offering]) -> list[dict]:
    """Header entry per level followed by that level's offerings, in one pass"""
    groups = []
    current_level = None
    for offering in sorted_offerings:
        if offering.level != current_level:
            current_level = offering.level
            groups.append({
                'type': 'header',
                'level': offering.level,
                'label': LEVEL_GROUP_NAMES.get(offering.level, offering.level),
            })
        groups.append({'type': 'item', **offering.as_dict()})
    return groups


def _normalize_contact_type(value) -> str:
    value = str(value or '').strip().lower()
    if value == 'whatsapp':
        return CONTACT_WHATSAPP
    if value == 'call':
        return CONTACT_CALL
    return CONTACT_UNKNOWN


def _first(record: dict, *keys, default=''):
    for key in keys:
        value = record.get(key)
        if value is not None and value != '':
            return value
    return default


def centre_from_record(record: dict) -> Centre:
    name = str(_first(record, 'name')).strip()
    offerings = tuple(
        Offering(level=str(o.get('level') or '').strip(), subject=str(o.get('subject') or '').strip())
        for o in record.get('offerings') or []
    )
    return Centre(
        centre_id=generate_centre_id(name),
        name=name,
        address=str(_first(record, 'address')).strip(),
        postal_code=str(_first(record, 'postalCode', 'postal_code')).strip(),
        contact_type=_normalize_contact_type(_first(record, 'contactType', 'contact_type')),
        contact_number=str(_first(record, 'whatsappNumber', 'contactNumber', 'contact_number')).strip(),
        website_url=str(_first(record, 'websiteUrl', 'website_url')).strip(),
        offerings=offerings,
    )


def load_centres(path) -> list[Centre]:
    """Load centres from a JSON file holding a list of centre records"""
    p = Path(path)
    if not p.exists():
        print(f"[CentreCatalog] Data file not found: {p}")
        return []

    with p.open(encoding='utf-8') as fh:
        records = json.load(fh)

    centres = []
    for record in records:
        if not record.get('name'):
            print(f"[CentreCatalog] Skipping record without a name: {record}")
            continue
        centres.append(centre_from_record(record))
    return centres


class CentreCatalog:
    """Lookup and search over the loaded centres"""

    def __init__(self, centres: Iterable[Centre]):
        self.centres = list(centres)
        self._by_id = {c.centre_id: c for c in self.centres}

    @classmethod
    def from_file(cls, path) -> 'CentreCatalog':
        return cls(load_centres(path))

    def get(self, centre_id: str) -> Centre | None:
        return self._by_id.get(centre_id)

    def names(self) -> list[str]:
        return [c.name for c in self.centres]

    def filter_options(self) -> dict:
        levels = set()
        subjects = set()
        for centre in self.centres:
            for offering in centre.offerings:
                if offering.level:
                    levels.add(offering.level)
                if offering.subject:
                    subjects.add(offering.subject)
        return {
            'levels': sorted(levels, key=lambda v: (_rank(v, LEVEL_ORDER), v)),
            'subjects': sorted(subjects, key=lambda v: (_rank(v, SUBJECT_ORDER), v)),
        }

    def subjects_for_level(self, level: str) -> list[str]:
        subjects = {
            o.subject
            for centre in self.centres
            for o in centre.offerings
            if o.level == level and o.subject
        }
        return sorted(subjects, key=lambda v: (_rank(v, SUBJECT_ORDER), v))

    def search(self, level: str, subject: str) -> list[Centre]:
        return [
            c for c in self.centres
            if any(o.level == level and o.subject == subject for o in c.offerings)
        ]

    def search_by_name(self, name: str) -> list[Centre]:
        needle = (name or '').strip().lower()
        if not needle:
            return []
        return [c for c in self.centres if needle in c.name.lower()]


def get_catalog() -> CentreCatalog:
    """Catalog for the current app, loaded once from CENTRES_DATA_PATH"""
    catalog = current_app.extensions.get('centre_catalog')
    if catalog is None:
        catalog = CentreCatalog.from_file(current_app.config['CENTRES_DATA_PATH'])
        current_app.extensions['centre_catalog'] = catalog
        print(f"[CentreCatalog] Loaded {len(catalog.centres)} centres")
    return catalog
