"""
Identity & Naming Service
=========================
Derives the canonical name and storage path of an uploaded asset.

Canonical name:  {YYYYMMDD}_{AREA}_{NUCLEUS}_{THEME}_{STATUS}_{TOKEN}
Storage path:    {stage folder}/{YYYY}/{MM}/{DD}/{canonical name}.{ext}

Every missing or unrecognised classification value degrades to a fallback
token; nothing here raises for malformed metadata.
"""

import re
import unicodedata
from datetime import date, datetime

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from catalog import taxonomy

FALLBACK_TOKEN = 'GERAL'
DEFAULT_SLUG_LENGTH = 15
DEFAULT_EXTENSION = 'jpg'

AREA_CODE_LENGTH = 8
NUCLEUS_CODE_LENGTH = 8
THEME_CODE_LENGTH = 10
SHORT_TOKEN_LENGTH = 8

# Checked in order; the first non-empty one names the file
NUCLEUS_FIELDS = ('livestock_nucleus', 'agro_nucleus', 'operation', 'brand')

INTAKE_FOLDER = '00_ENTRADA'

# Stage folders in workflow order
FOLDER_STAGES = [
    {'id': 'entrada', 'name': '00 - Entrada (Bruto)', 'slug': INTAKE_FOLDER},
    {'id': 'catalogado', 'name': '01 - Catalogado', 'slug': '01_CATALOGADO'},
    {'id': 'producao', 'name': '02 - Em Produção', 'slug': '02_PRODUCAO'},
    {'id': 'aprovacao', 'name': '03 - Em Aprovação', 'slug': '03_APROVACAO'},
    {'id': 'aprovado', 'name': '04 - Aprovado', 'slug': '04_APROVADO'},
    {'id': 'publicado', 'name': '05 - Publicado', 'slug': '05_PUBLICADO'},
    {'id': 'arquivado', 'name': '06 - Arquivado', 'slug': '06_ARQUIVADO'},
]

# Status code -> stage folder
STAGE_BY_STATUS_CODE = {
    'ENT': INTAKE_FOLDER,
    'TRI': INTAKE_FOLDER,
    'CAT': '01_CATALOGADO',
    'SEL': '01_CATALOGADO',
    'PRO': '02_PRODUCAO',
    'APR': '03_APROVACAO',
    'APO': '04_APROVADO',
    'PUB': '05_PUBLICADO',
    'ARQ': '06_ARQUIVADO',
}

IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp', 'heic', 'tif', 'tiff'}
VIDEO_EXTENSIONS = {'mp4', 'mov', 'avi', 'mkv', 'm4v'}

_NON_ALNUM = re.compile(r'[^a-zA-Z0-9]')


class NamingService:
    """
    Pure functions computing identity values at upload time.

    The results are frozen into the catalog record; later metadata edits
    never regenerate them.
    """

    @staticmethod
    def slugify(text, max_length=DEFAULT_SLUG_LENGTH) -> str:
        """
        Normalize text into an upper-case alphanumeric token.

        Removes diacritics, strips every non-alphanumeric character,
        upper-cases and truncates to `max_length`. Empty input yields the
        fallback token (truncated the same way, so re-applying is stable).

        Args:
            text: Any value; None and empty strings are accepted
            max_length: Maximum token length

        Returns:
            str: Slug token
        """
        if text is None:
            return FALLBACK_TOKEN[:max_length]
        decomposed = unicodedata.normalize('NFD', str(text))
        stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
        slug = _NON_ALNUM.sub('', stripped).upper()[:max_length]
        return slug or FALLBACK_TOKEN[:max_length]

    @staticmethod
    def derive_folder_stage(status) -> str:
        """
        Map a workflow status (name or 3-letter code) to its stage folder.

        Unknown or missing statuses land in the intake folder.
        """
        code = taxonomy.status_code_for(status)
        return STAGE_BY_STATUS_CODE.get(code, INTAKE_FOLDER)

    @staticmethod
    def parse_capture_date(value):
        """
        Parse a capture date value, returning None when it is missing or unparseable.

        Accepts `date`/`datetime` objects and ISO 8601 date or datetime strings.
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not value:
            return None

        text = str(value).strip()
        try:
            parsed = parse_datetime(text)
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed.date()
        try:
            return parse_date(text[:10])
        except ValueError:
            return None

    @classmethod
    def resolve_capture_date(cls, metadata, now=None) -> date:
        """Capture date from metadata, falling back to the current local date."""
        parsed = cls.parse_capture_date((metadata or {}).get('capture_date'))
        if parsed is not None:
            return parsed

        current = now or timezone.now()
        if timezone.is_aware(current):
            current = timezone.localtime(current)
        return current.date()

    @classmethod
    def area_code(cls, area) -> str:
        """Taxonomy short id for the area, or its slug."""
        return taxonomy.area_code_for(area) or cls.slugify(area, AREA_CODE_LENGTH)

    @classmethod
    def nucleus_code(cls, metadata) -> str:
        """Slug of the first non-empty nucleus field."""
        metadata = metadata or {}
        for field in NUCLEUS_FIELDS:
            value = metadata.get(field)
            if value:
                return cls.slugify(value, NUCLEUS_CODE_LENGTH)
        return FALLBACK_TOKEN

    @staticmethod
    def status_code(status) -> str:
        """3-letter status abbreviation, defaulting to intake."""
        return taxonomy.status_code_for(status) or taxonomy.INITIAL_STATUS_CODE

    @classmethod
    def build_canonical_name(cls, metadata, unique_token, now=None) -> str:
        """
        Build the human-scannable canonical name of an asset.

        Args:
            metadata: Mapping with capture_date, area, nucleus fields,
                main_theme and status (all optional)
            unique_token: Random token; its first 8 characters are used
            now: Reference time when capture_date is absent

        Returns:
            str: e.g. '20240315_VILACAN_GERAL_TERRAESERT_CAT_A1B2C3D4'
        """
        metadata = metadata or {}
        captured = cls.resolve_capture_date(metadata, now=now)
        short_token = str(unique_token).replace('-', '')[:SHORT_TOKEN_LENGTH].upper()

        return '_'.join([
            captured.strftime('%Y%m%d'),
            cls.area_code(metadata.get('area')),
            cls.nucleus_code(metadata),
            cls.slugify(metadata.get('main_theme'), THEME_CODE_LENGTH),
            cls.status_code(metadata.get('status')),
            short_token,
        ])

    @classmethod
    def build_folder_path(cls, metadata, now=None) -> str:
        """Stage folder plus date partition, without the file name."""
        metadata = metadata or {}
        captured = cls.resolve_capture_date(metadata, now=now)
        stage = cls.derive_folder_stage(metadata.get('status'))
        return f"{stage}/{captured.year}/{captured.month:02d}/{captured.day:02d}"

    @classmethod
    def build_storage_path(cls, metadata, canonical_name, extension, now=None) -> str:
        """
        Object key for the asset with the storage provider.

        Returns:
            str: '{stage}/{YYYY}/{MM}/{DD}/{canonical_name}.{extension}'
        """
        folder = cls.build_folder_path(metadata, now=now)
        ext = str(extension or DEFAULT_EXTENSION).lstrip('.').lower()
        return f"{folder}/{canonical_name}.{ext}"

    @staticmethod
    def extension_from_filename(filename) -> str:
        """Lower-case extension of a file name; 'jpg' when there is none."""
        name = str(filename or '').rsplit('/', 1)[-1]
        if '.' not in name:
            return DEFAULT_EXTENSION
        ext = name.rsplit('.', 1)[-1].lower()
        return ext or DEFAULT_EXTENSION

    @staticmethod
    def detect_kind(extension) -> str:
        """'image', 'video' or 'other' from a file extension."""
        ext = str(extension or '').lstrip('.').lower()
        if ext in IMAGE_EXTENSIONS:
            return 'image'
        if ext in VIDEO_EXTENSIONS:
            return 'video'
        return 'other'
