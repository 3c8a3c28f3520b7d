import re

from rest_framework import serializers

from contracts.models import MediaAsset
from catalog import taxonomy


def validate_status_value(value):
    """Accept a status by name or 3-letter code; return its canonical name."""
    name = taxonomy.status_name_for(value)
    if name is None:
        raise serializers.ValidationError(
            f"Unknown status {value!r}. Expected one of: {', '.join(taxonomy.STATUS_NAMES)}"
        )
    return name


def to_camel(name):
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def to_snake(name):
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


class MediaAssetSerializer(serializers.ModelSerializer):
    """
    Serializer for MediaAsset API responses.
    Identity and workflow fields are read-only here; edits go through
    MediaAssetUpdateSerializer and StatusTransitionSerializer.
    """
    primary_nucleus = serializers.ReadOnlyField()
    folder_stage = serializers.ReadOnlyField()

    class Meta:
        model = MediaAsset
        fields = [
            'id',
            'canonical_name',
            'file_name',
            'file_path',
            'folder_stage',
            'original_filename',
            'url',
            'thumbnail_url',
            'size',
            'content_type',
            'extension',
            'kind',
            'duration_sec',
            'width',
            'height',
            'status',
            'status_history',
            'capture_date',
            'area',
            'capture_point',
            'project_type',
            'livestock_nucleus',
            'livestock_subnucleus',
            'agro_nucleus',
            'agro_subnucleus',
            'operation',
            'sub_operation',
            'brand',
            'sub_brand',
            'primary_nucleus',
            'main_theme',
            'secondary_theme',
            'event',
            'historical_function',
            'chapter',
            'uploaded_by',
            'revision',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class UploadMetadataSerializer(serializers.Serializer):
    """Classification metadata sent with an upload."""
    status = serializers.CharField(required=False, default=taxonomy.INITIAL_STATUS)
    capture_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    area = serializers.CharField(required=False, allow_blank=True, default='')
    capture_point = serializers.CharField(required=False, allow_blank=True, default='')
    project_type = serializers.CharField(required=False, allow_blank=True, default='')
    livestock_nucleus = serializers.CharField(required=False, allow_blank=True, default='')
    livestock_subnucleus = serializers.CharField(required=False, allow_blank=True, default='')
    agro_nucleus = serializers.CharField(required=False, allow_blank=True, default='')
    agro_subnucleus = serializers.CharField(required=False, allow_blank=True, default='')
    operation = serializers.CharField(required=False, allow_blank=True, default='')
    sub_operation = serializers.CharField(required=False, allow_blank=True, default='')
    brand = serializers.CharField(required=False, allow_blank=True, default='')
    sub_brand = serializers.CharField(required=False, allow_blank=True, default='')
    main_theme = serializers.CharField(required=False, allow_blank=True, default='')
    secondary_theme = serializers.CharField(required=False, allow_blank=True, default='')
    event = serializers.CharField(required=False, allow_blank=True, default='')
    historical_function = serializers.CharField(required=False, allow_blank=True, default='')
    chapter = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_status(self, value):
        return validate_status_value(value)


class PresignRequestSerializer(serializers.Serializer):
    """Body of POST /api/upload/presigned/."""
    filename = serializers.CharField(max_length=255)
    content_type = serializers.CharField(required=False, allow_blank=True, default='application/octet-stream')
    size = serializers.IntegerField(required=False, min_value=0, default=0)
    metadata = UploadMetadataSerializer()

    def validate(self, attrs):
        metadata = attrs['metadata']
        missing = [name for name in ('area', 'main_theme') if not metadata.get(name)]
        if missing:
            raise serializers.ValidationError({
                'metadata': [f"Required: {', '.join(missing)}"]
            })
        return attrs


class CompleteUploadSerializer(serializers.Serializer):
    """Body of POST /api/upload/complete/."""
    file_path = serializers.CharField(max_length=1024)
    metadata = UploadMetadataSerializer(required=False)
    original_filename = serializers.CharField(required=False, allow_blank=True, default='')
    size = serializers.IntegerField(required=False, min_value=0, default=0)
    content_type = serializers.CharField(required=False, allow_blank=True, default='application/octet-stream')
    duration_sec = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    width = serializers.IntegerField(required=False, allow_null=True, min_value=0, default=None)
    height = serializers.IntegerField(required=False, allow_null=True, min_value=0, default=None)
    actor = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_file_path(self, value):
        value = value.strip().strip('/')
        if not value:
            raise serializers.ValidationError('file_path must name an object')
        return value


class MediaAssetUpdateSerializer(serializers.Serializer):
    """
    Body of PATCH /api/media/{id}/.

    Only the fields present in the request are applied. `actor` and `note`
    are recorded in the status history when `status` changes.
    """
    status = serializers.CharField(required=False)
    capture_date = serializers.DateField(required=False, allow_null=True)
    area = serializers.CharField(required=False, allow_blank=True)
    capture_point = serializers.CharField(required=False, allow_blank=True)
    project_type = serializers.CharField(required=False, allow_blank=True)
    livestock_nucleus = serializers.CharField(required=False, allow_blank=True)
    livestock_subnucleus = serializers.CharField(required=False, allow_blank=True)
    agro_nucleus = serializers.CharField(required=False, allow_blank=True)
    agro_subnucleus = serializers.CharField(required=False, allow_blank=True)
    operation = serializers.CharField(required=False, allow_blank=True)
    sub_operation = serializers.CharField(required=False, allow_blank=True)
    brand = serializers.CharField(required=False, allow_blank=True)
    sub_brand = serializers.CharField(required=False, allow_blank=True)
    main_theme = serializers.CharField(required=False, allow_blank=True)
    secondary_theme = serializers.CharField(required=False, allow_blank=True)
    event = serializers.CharField(required=False, allow_blank=True)
    historical_function = serializers.CharField(required=False, allow_blank=True)
    chapter = serializers.CharField(required=False, allow_blank=True)
    original_filename = serializers.CharField(required=False, allow_blank=True)
    duration_sec = serializers.FloatField(required=False, allow_null=True, min_value=0)
    width = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    height = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    actor = serializers.CharField(required=False, allow_blank=True)
    note = serializers.CharField(required=False, allow_blank=True)

    def validate_status(self, value):
        return validate_status_value(value)


class StatusTransitionSerializer(serializers.Serializer):
    """Body of POST /api/media/{id}/status/."""
    status = serializers.CharField()
    actor = serializers.CharField(required=False, allow_blank=True, default='')
    note = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_status(self, value):
        return validate_status_value(value)


class MediaAssetDocumentSerializer(serializers.ModelSerializer):
    """
    Persisted JSON representation of a record (camelCase keys), used by the
    export_catalog and import_catalog commands.
    """
    status_history = serializers.ListField(child=serializers.DictField(), allow_empty=False)

    class Meta:
        model = MediaAsset
        fields = [field.name for field in MediaAsset._meta.concrete_fields]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {to_camel(key): value for key, value in data.items()}

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise serializers.ValidationError({'non_field_errors': ['Expected a JSON object']})
        return super().to_internal_value({to_snake(key): value for key, value in data.items()})

    def validate_status_history(self, value):
        for index, entry in enumerate(value):
            if not entry.get('status') or not entry.get('timestamp'):
                raise serializers.ValidationError(
                    f"Entry {index} must have a status and a timestamp"
                )
        return value

    def validate(self, attrs):
        status = attrs.get('status', getattr(self.instance, 'status', taxonomy.INITIAL_STATUS))
        history = attrs.get('status_history') or []
        if history and history[-1].get('status') != status:
            raise serializers.ValidationError({
                'status_history': [f"Last entry must match the current status {status!r}"]
            })
        return attrs
