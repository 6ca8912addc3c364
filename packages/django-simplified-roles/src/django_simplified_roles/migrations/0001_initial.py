# Generated manually for standalone django-simplified-roles package

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

ROLE_CHOICES = [
    ("administrator", "Administrator"),
    ("editor", "Editor"),
    ("author", "Author"),
    ("contributor", "Contributor"),
    ("subscriber", "Subscriber"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="RoleDefinition",
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
                    "identity",
                    models.CharField(
                        choices=ROLE_CHOICES,
                        max_length=32,
                        unique=True,
                        verbose_name="identity",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                (
                    "capabilities",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Sorted list of capability tokens granted by this role",
                        verbose_name="capabilities",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "role definition",
                "verbose_name_plural": "role definitions",
                "ordering": ["identity"],
            },
        ),
        migrations.CreateModel(
            name="MigrationMarker",
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
                    "name",
                    models.CharField(
                        help_text="Marker key, e.g. 'simplified_roles_add_cap_editor_once'",
                        max_length=191,
                        unique=True,
                        verbose_name="name",
                    ),
                ),
                ("applied_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "migration marker",
                "verbose_name_plural": "migration markers",
            },
        ),
        migrations.CreateModel(
            name="UserRole",
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
                    "role",
                    models.CharField(
                        choices=ROLE_CHOICES,
                        db_index=True,
                        max_length=32,
                        verbose_name="role",
                    ),
                ),
                ("assigned_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="simplified_role",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "user role",
                "verbose_name_plural": "user roles",
            },
        ),
    ]
