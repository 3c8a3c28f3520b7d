"""
Catalog filtering for GET /api/media/.

Filter Types:
- area, theme, status, kind: Exact match
- nucleus: Exact match on any of the four nucleus fields
- search: Case-insensitive substring match on canonical name, file name,
  original file name, area and main theme
- date_from/date_to: Capture date range

All filters use AND logic when combined.
"""

from django.db.models import Q
from django_filters import rest_framework as filters

from contracts.models import MediaAsset
from catalog.services.naming import NUCLEUS_FIELDS


class MediaAssetFilter(filters.FilterSet):
    """
    FilterSet for MediaAsset.

    Query Parameters:
        area: Area name (e.g., 'Vila Canabrava')
        nucleus: Nucleus name in any nucleus field (e.g., 'Cria')
        theme: Main theme (e.g., 'Terra e Sertão')
        status: Workflow status (e.g., 'Catalogado')
        kind: image, video or other
        search: Substring over names, area and theme
        date_from: Captured on or after this date (ISO 8601)
        date_to: Captured on or before this date (ISO 8601)
    """

    area = filters.CharFilter(field_name='area', lookup_expr='exact')
    theme = filters.CharFilter(field_name='main_theme', lookup_expr='exact')
    status = filters.CharFilter(field_name='status', lookup_expr='exact')
    kind = filters.ChoiceFilter(field_name='kind', choices=MediaAsset.KIND_CHOICES)

    nucleus = filters.CharFilter(
        method='filter_nucleus',
        help_text='Matches livestock, agro, operations or brand nucleus'
    )

    search = filters.CharFilter(
        method='filter_search',
        max_length=255,
        help_text='Case-insensitive substring match on names, area and theme'
    )

    date_from = filters.DateFilter(
        field_name='capture_date',
        lookup_expr='gte',
        help_text='Captured on or after this date (ISO 8601)'
    )
    date_to = filters.DateFilter(
        field_name='capture_date',
        lookup_expr='lte',
        help_text='Captured on or before this date (ISO 8601)'
    )

    class Meta:
        model = MediaAsset
        fields = [
            'area',
            'theme',
            'status',
            'kind',
            'nucleus',
            'search',
            'date_from',
            'date_to',
        ]

    def filter_nucleus(self, queryset, name, value):
        if not value:
            return queryset
        condition = Q()
        for field in NUCLEUS_FIELDS:
            condition |= Q(**{field: value})
        return queryset.filter(condition)

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(canonical_name__icontains=value)
            | Q(file_name__icontains=value)
            | Q(original_filename__icontains=value)
            | Q(area__icontains=value)
            | Q(main_theme__icontains=value)
        )
