import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("inventory", "0001_initial"),
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AdverseEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("event_date", models.DateField(verbose_name="Event date")),
                ("study_day", models.PositiveIntegerField(verbose_name="Study day")),
                ("event_type", models.CharField(max_length=100, verbose_name="Event type")),
                (
                    "severity",
                    models.CharField(
                        choices=[
                            ("minor", "Minor"),
                            ("moderate", "Moderate"),
                            ("severe", "Severe"),
                            ("life_threatening", "Life threatening"),
                        ],
                        db_index=True,
                        max_length=20,
                        verbose_name="Severity",
                    ),
                ),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("action_taken", models.TextField(blank=True, verbose_name="Action taken")),
                ("reported_to_pi", models.BooleanField(default=False, verbose_name="Reported to PI")),
                (
                    "requires_dropout",
                    models.BooleanField(
                        default=False,
                        help_text="Recording the event also drops the patient out of the study.",
                        verbose_name="Requires dropout",
                    ),
                ),
                (
                    "logged_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="adverse_events",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Adverse event",
                "verbose_name_plural": "Adverse events",
                "db_table": "monitoring_adverse_events",
                "ordering": ("-event_date", "-id"),
            },
        ),
        migrations.CreateModel(
            name="IssueLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("contact_date", models.DateField(verbose_name="Contact date")),
                (
                    "contact_type",
                    models.CharField(
                        choices=[("phone", "Phone"), ("home_visit", "Home visit")],
                        max_length=20,
                        verbose_name="Contact type",
                    ),
                ),
                ("duration_minutes", models.PositiveIntegerField(blank=True, null=True, verbose_name="Duration (min)")),
                (
                    "issue_type",
                    models.CharField(
                        choices=[
                            ("technical", "Technical"),
                            ("medical", "Medical"),
                            ("scheduling", "Scheduling"),
                            ("other", "Other"),
                        ],
                        db_index=True,
                        max_length=20,
                        verbose_name="Issue type",
                    ),
                ),
                ("issue_description", models.TextField(blank=True, verbose_name="Issue")),
                ("root_cause", models.TextField(blank=True, verbose_name="Root cause")),
                ("solution_provided", models.TextField(blank=True, verbose_name="Solution")),
                ("follow_up_required", models.BooleanField(default=False, verbose_name="Follow-up required")),
                ("follow_up_date", models.DateField(blank=True, null=True, verbose_name="Follow-up date")),
                (
                    "logged_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="issue_logs",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Issue log",
                "verbose_name_plural": "Issue logs",
                "db_table": "monitoring_issue_logs",
                "ordering": ("-contact_date", "-id"),
            },
        ),
        migrations.CreateModel(
            name="Reminder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "reminder_type",
                    models.CharField(
                        choices=[
                            ("study_event", "Study event"),
                            ("sim_recharge", "SIM recharge"),
                            ("follow_up", "Follow-up"),
                            ("general", "General"),
                        ],
                        db_index=True,
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("title", models.CharField(max_length=200, verbose_name="Title")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("due_date", models.DateField(db_index=True, verbose_name="Due date")),
                ("is_completed", models.BooleanField(default=False, verbose_name="Completed")),
                (
                    "issue_log",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reminders",
                        to="monitoring.issuelog",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reminders",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
                (
                    "sim_card",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reminders",
                        to="inventory.simcard",
                    ),
                ),
                (
                    "study_event",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reminders",
                        to="core.studyevent",
                    ),
                ),
            ],
            options={
                "verbose_name": "Reminder",
                "verbose_name_plural": "Reminders",
                "db_table": "monitoring_reminders",
                "ordering": ("due_date", "id"),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("issue_log__isnull", True),
                                ("reminder_type", "study_event"),
                                ("sim_card__isnull", True),
                                ("study_event__isnull", False),
                            ),
                            models.Q(
                                ("issue_log__isnull", True),
                                ("reminder_type", "sim_recharge"),
                                ("sim_card__isnull", False),
                                ("study_event__isnull", True),
                            ),
                            models.Q(
                                ("issue_log__isnull", False),
                                ("reminder_type", "follow_up"),
                                ("sim_card__isnull", True),
                                ("study_event__isnull", True),
                            ),
                            models.Q(
                                ("issue_log__isnull", True),
                                ("reminder_type", "general"),
                                ("sim_card__isnull", True),
                                ("study_event__isnull", True),
                            ),
                            _connector="OR",
                        ),
                        name="reminder_reference_matches_type",
                    )
                ],
            },
        ),
    ]
