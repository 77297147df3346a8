from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditEvent",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("POSITIONS_IMPORTED", "Positions imported"),
                            ("POSITIONS_CLEARED", "Positions cleared"),
                        ],
                        db_index=True,
                        max_length=100,
                        verbose_name="Action",
                    ),
                ),
                (
                    "object_type",
                    models.CharField(
                        db_index=True, max_length=100, verbose_name="Object Type"
                    ),
                ),
                (
                    "object_id",
                    models.IntegerField(blank=True, null=True, verbose_name="Object ID"),
                ),
                (
                    "object_repr",
                    models.CharField(
                        blank=True,
                        max_length=255,
                        null=True,
                        verbose_name="Object Representation",
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(blank=True, default=dict, verbose_name="Metadata"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, verbose_name="Created At"
                    ),
                ),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who performed this action (None for system/automated actions).",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_events",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Actor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Audit Event",
                "verbose_name_plural": "Audit Events",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["action", "object_type"], name="idx_audit_action_type"
                    ),
                    models.Index(
                        fields=["object_type", "object_id"], name="idx_audit_object"
                    ),
                ],
            },
        ),
    ]
