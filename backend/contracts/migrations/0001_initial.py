# Generated migration for the media catalog data contract

from django.db import migrations, models
import contracts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='MediaAsset',
            fields=[
                ('id', models.CharField(
                    default=contracts.models.generate_asset_id,
                    help_text='Stable unique identifier assigned at upload completion',
                    max_length=128,
                    primary_key=True,
                    serialize=False
                )),
                ('canonical_name', models.CharField(
                    help_text='Date/area/nucleus/theme/status/token name, generated once',
                    max_length=255
                )),
                ('file_name', models.CharField(
                    help_text='Canonical name plus extension',
                    max_length=255
                )),
                ('file_path', models.CharField(
                    help_text='Object key with the storage provider',
                    max_length=1024
                )),
                ('original_filename', models.CharField(
                    blank=True,
                    default='',
                    help_text='Filename as chosen by the uploader',
                    max_length=255
                )),
                ('url', models.CharField(
                    blank=True,
                    default='',
                    help_text='Public download URL',
                    max_length=2048
                )),
                ('thumbnail_url', models.CharField(
                    blank=True,
                    default='',
                    help_text='Preview URL',
                    max_length=2048
                )),
                ('size', models.BigIntegerField(
                    default=0,
                    help_text='File size in bytes'
                )),
                ('content_type', models.CharField(
                    default='application/octet-stream',
                    help_text='MIME type of the file',
                    max_length=100
                )),
                ('extension', models.CharField(
                    blank=True,
                    default='',
                    help_text='Lower-case file extension',
                    max_length=16
                )),
                ('kind', models.CharField(
                    choices=[('image', 'Image'), ('video', 'Video'), ('other', 'Other')],
                    default='other',
                    help_text='Media kind derived from the extension',
                    max_length=10
                )),
                ('duration_sec', models.FloatField(
                    blank=True,
                    help_text='Video duration in seconds',
                    null=True
                )),
                ('width', models.PositiveIntegerField(blank=True, null=True)),
                ('height', models.PositiveIntegerField(blank=True, null=True)),
                ('status', models.CharField(
                    default='Entrada (Bruto)',
                    help_text='Current workflow status',
                    max_length=64
                )),
                ('status_history', models.JSONField(
                    blank=True,
                    default=list,
                    help_text='Append-only list of status changes'
                )),
                ('capture_date', models.DateField(
                    blank=True,
                    help_text='Date the material was captured',
                    null=True
                )),
                ('area', models.CharField(blank=True, default='', max_length=255)),
                ('capture_point', models.CharField(blank=True, default='', max_length=255)),
                ('project_type', models.CharField(blank=True, default='', max_length=255)),
                ('livestock_nucleus', models.CharField(blank=True, default='', max_length=255)),
                ('livestock_subnucleus', models.CharField(blank=True, default='', max_length=255)),
                ('agro_nucleus', models.CharField(blank=True, default='', max_length=255)),
                ('agro_subnucleus', models.CharField(blank=True, default='', max_length=255)),
                ('operation', models.CharField(blank=True, default='', max_length=255)),
                ('sub_operation', models.CharField(blank=True, default='', max_length=255)),
                ('brand', models.CharField(blank=True, default='', max_length=255)),
                ('sub_brand', models.CharField(blank=True, default='', max_length=255)),
                ('main_theme', models.CharField(blank=True, default='', max_length=255)),
                ('secondary_theme', models.CharField(blank=True, default='', max_length=255)),
                ('event', models.CharField(blank=True, default='', max_length=255)),
                ('historical_function', models.CharField(blank=True, default='', max_length=255)),
                ('chapter', models.CharField(blank=True, default='', max_length=255)),
                ('uploaded_by', models.CharField(
                    blank=True,
                    default='',
                    help_text='Who completed the upload',
                    max_length=150
                )),
                ('revision', models.PositiveIntegerField(
                    default=0,
                    help_text='Incremented on every store write (compare-and-swap)'
                )),
                ('created_at', models.DateTimeField(
                    blank=True,
                    help_text='Set at first save',
                    null=True
                )),
                ('updated_at', models.DateTimeField(
                    blank=True,
                    help_text='Set at every save',
                    null=True
                )),
            ],
            options={
                'verbose_name': 'Media Asset',
                'verbose_name_plural': 'Media Assets',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='mediaasset',
            index=models.Index(fields=['canonical_name'], name='asset_canonical_idx'),
        ),
        migrations.AddIndex(
            model_name='mediaasset',
            index=models.Index(fields=['status'], name='asset_status_idx'),
        ),
        migrations.AddIndex(
            model_name='mediaasset',
            index=models.Index(fields=['area'], name='asset_area_idx'),
        ),
        migrations.AddIndex(
            model_name='mediaasset',
            index=models.Index(fields=['main_theme'], name='asset_theme_idx'),
        ),
        migrations.AddIndex(
            model_name='mediaasset',
            index=models.Index(fields=['created_at'], name='asset_created_idx'),
        ),
    ]
