import django.core.serializers.json
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("actor_name", models.CharField(default="unknown", max_length=150)),
                ("action", models.CharField(max_length=100)),
                ("table_name", models.CharField(db_index=True, max_length=100)),
                ("record_id", models.CharField(blank=True, default="", max_length=255)),
                (
                    "changes",
                    models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "verbose_name": "audit log entry",
                "verbose_name_plural": "audit log",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["action", "created_at"], name="audit_action_created_idx"),
                    models.Index(fields=["table_name", "record_id"], name="audit_table_record_idx"),
                ],
            },
        ),
    ]
