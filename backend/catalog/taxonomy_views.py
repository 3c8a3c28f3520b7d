"""
Read-only views over the classification taxonomy.
"""

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from catalog import taxonomy


@api_view(['GET'])
def taxonomy_index(request):
    """Complete taxonomy keyed by section."""
    return Response(taxonomy.as_dict())


@api_view(['GET'])
def taxonomy_section(request, section):
    """
    One taxonomy section.

    Nested sections (nuclei, operations, brand, secondary themes) are
    returned as name -> sub-items mappings.
    """
    data = taxonomy.get_section(section)
    if data is None:
        return Response(
            {'error': f'Unknown taxonomy section {section!r}', 'sections': list(taxonomy.SECTIONS)},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response(data)


@api_view(['GET'])
def taxonomy_sub_items(request, section, parent):
    """Sub-items of one entry of a nested section."""
    if taxonomy.get_section(section) is None:
        return Response(
            {'error': f'Unknown taxonomy section {section!r}'},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response({
        'section': section,
        'parent': parent,
        'results': taxonomy.get_sub_items(section, parent),
    })
