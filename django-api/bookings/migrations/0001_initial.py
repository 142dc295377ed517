from django.db import migrations, models

import bookings.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Document",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("collection", models.CharField(max_length=64)),
                ("doc_id", models.CharField(default=bookings.models.new_document_id, max_length=64)),
                ("data", models.JSONField(default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["collection", "created_at"],
                "indexes": [models.Index(fields=["collection", "created_at"], name="document_collection_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("collection", "doc_id"), name="document_collection_doc_id_uniq")
                ],
            },
        ),
    ]
