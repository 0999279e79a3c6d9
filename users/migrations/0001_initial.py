import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import users.managers.custom_user


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("email", models.EmailField(help_text="Login identifier.", max_length=254, unique=True, verbose_name="Email")),
                ("first_name", models.CharField(max_length=50, verbose_name="First name")),
                ("last_name", models.CharField(blank=True, max_length=50, verbose_name="Last name")),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Administrator"), ("therapist", "Therapist"), ("data_entry", "Data entry")],
                        default="data_entry",
                        max_length=20,
                        verbose_name="Role",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, help_text="Inactive accounts cannot log in.", verbose_name="Active")),
                ("is_staff", models.BooleanField(default=False, verbose_name="Admin site access")),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "Staff user",
                "verbose_name_plural": "Staff users",
            },
            managers=[
                ("objects", users.managers.custom_user.CustomUserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "patient_code",
                    models.CharField(
                        help_text="Human-assigned study identifier, e.g. INT-001.",
                        max_length=20,
                        unique=True,
                        verbose_name="Patient ID",
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=100, verbose_name="Name")),
                (
                    "gender",
                    models.CharField(
                        blank=True,
                        choices=[("male", "Male"), ("female", "Female"), ("other", "Other")],
                        max_length=10,
                        verbose_name="Gender",
                    ),
                ),
                (
                    "age",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(18),
                            django.core.validators.MaxValueValidator(100),
                        ],
                        verbose_name="Age",
                    ),
                ),
                (
                    "affected_hand",
                    models.CharField(choices=[("left", "Left"), ("right", "Right")], max_length=10, verbose_name="Affected hand"),
                ),
                (
                    "group_type",
                    models.CharField(
                        choices=[("intervention", "Intervention"), ("control", "Control")],
                        db_index=True,
                        max_length=20,
                        verbose_name="Group",
                    ),
                ),
                (
                    "vcg_assignment",
                    models.CharField(
                        blank=True,
                        choices=[("VCG2", "VCG 2"), ("VCG3", "VCG 3"), ("VCG4_5", "VCG 4-5")],
                        help_text="Control arm only: selects the manual exercise protocol.",
                        max_length=10,
                        verbose_name="VCG assignment",
                    ),
                ),
                ("a0_date", models.DateField(blank=True, null=True, verbose_name="A0 (baseline) date")),
                ("study_start_date", models.DateField(verbose_name="Study start date")),
                ("enrollment_date", models.DateField(verbose_name="Enrollment date")),
                ("phone_number", models.CharField(blank=True, max_length=20, verbose_name="Phone")),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("dropped_out", "Dropped out"), ("completed", "Completed")],
                        db_index=True,
                        default="active",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("dropout_date", models.DateField(blank=True, null=True, verbose_name="Dropout date")),
                ("dropout_reason", models.TextField(blank=True, verbose_name="Dropout reason")),
                ("dropout_reason_type", models.CharField(blank=True, max_length=50, verbose_name="Dropout reason type")),
                (
                    "schedule_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("generated", "Generated"), ("failed", "Failed")],
                        default="pending",
                        help_text="Failed generations stay visible here until retried.",
                        max_length=20,
                        verbose_name="Schedule generation",
                    ),
                ),
                ("schedule_error", models.TextField(blank=True, verbose_name="Schedule generation error")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_patients",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Patient",
                "verbose_name_plural": "Patients",
                "db_table": "users_patients",
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("table_name", models.CharField(max_length=50, verbose_name="Table")),
                ("record_id", models.CharField(blank=True, max_length=64, verbose_name="Record ID")),
                (
                    "action",
                    models.CharField(
                        choices=[("create", "Create"), ("update", "Update"), ("delete", "Delete")],
                        max_length=10,
                        verbose_name="Action",
                    ),
                ),
                ("path", models.CharField(max_length=255, verbose_name="Path")),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True, verbose_name="IP address")),
                ("new_values", models.JSONField(blank=True, null=True, verbose_name="Payload")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Audit log",
                "verbose_name_plural": "Audit logs",
                "db_table": "users_audit_logs",
                "ordering": ("-created_at",),
            },
        ),
    ]
