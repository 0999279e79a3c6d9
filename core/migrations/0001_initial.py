import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StudyEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("event_name", models.CharField(max_length=100, verbose_name="Event")),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("assessment", "Assessment"),
                            ("device_install", "Device installation"),
                            ("therapy", "Therapy"),
                            ("phone_call", "Phone call"),
                            ("reminder", "Reminder"),
                            ("home_visit", "Home visit"),
                            ("completion", "Completion"),
                            ("retrieval", "Retrieval"),
                        ],
                        max_length=20,
                        verbose_name="Event type",
                    ),
                ),
                (
                    "study_day",
                    models.IntegerField(
                        help_text="Offset from the study start date; baseline may be negative.",
                        verbose_name="Study day",
                    ),
                ),
                ("scheduled_date", models.DateField(db_index=True, verbose_name="Scheduled date")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("skipped", "Skipped"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("completion_date", models.DateField(blank=True, null=True, verbose_name="Completion date")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "completed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="completed_events",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Completed by",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="study_events",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Study event",
                "verbose_name_plural": "Study events",
                "db_table": "core_study_events",
                "ordering": ("study_day", "id"),
                "indexes": [models.Index(fields=["patient", "status"], name="core_event_patient_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="InterventionSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("session_date", models.DateField(verbose_name="Session date")),
                ("study_day", models.PositiveIntegerField(verbose_name="Study day")),
                ("duration_minutes", models.PositiveIntegerField(blank=True, null=True, verbose_name="Duration (min)")),
                ("adl_training_given", models.TextField(blank=True, verbose_name="ADL training")),
                ("patient_feedback", models.TextField(blank=True, verbose_name="Patient feedback")),
                ("therapist_notes", models.TextField(blank=True, verbose_name="Therapist notes")),
                (
                    "robotic_assessment_score",
                    models.FloatField(blank=True, null=True, verbose_name="Robotic assessment score"),
                ),
                ("exercises_performed", models.TextField(blank=True, verbose_name="Exercises performed")),
                ("mechanisms_used", models.TextField(blank=True, verbose_name="Mechanisms used")),
                ("device_performance_notes", models.TextField(blank=True, verbose_name="Device performance notes")),
                (
                    "logged_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Logged by",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="interventionsessions",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Intervention session",
                "verbose_name_plural": "Intervention sessions",
                "db_table": "core_intervention_sessions",
                "ordering": ("-session_date", "-id"),
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ControlSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("session_date", models.DateField(verbose_name="Session date")),
                ("study_day", models.PositiveIntegerField(verbose_name="Study day")),
                ("duration_minutes", models.PositiveIntegerField(blank=True, null=True, verbose_name="Duration (min)")),
                ("adl_training_given", models.TextField(blank=True, verbose_name="ADL training")),
                ("patient_feedback", models.TextField(blank=True, verbose_name="Patient feedback")),
                ("therapist_notes", models.TextField(blank=True, verbose_name="Therapist notes")),
                ("manual_exercises_given", models.TextField(blank=True, verbose_name="Manual exercises")),
                (
                    "logged_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Logged by",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="controlsessions",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Control session",
                "verbose_name_plural": "Control sessions",
                "db_table": "core_control_sessions",
                "ordering": ("-session_date", "-id"),
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="PatientExercise",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "group_type",
                    models.CharField(
                        choices=[("intervention", "Intervention"), ("control", "Control")],
                        max_length=20,
                        verbose_name="Group",
                    ),
                ),
                ("mars_mechanisms", models.TextField(blank=True, verbose_name="MARS mechanisms")),
                ("pluto_mechanisms", models.TextField(blank=True, verbose_name="PLUTO mechanisms")),
                ("control_exercises", models.TextField(blank=True, verbose_name="Control exercises")),
                ("adl_notes", models.TextField(blank=True, verbose_name="ADL notes")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("study_day", models.PositiveIntegerField(verbose_name="Study day")),
                ("is_current", models.BooleanField(default=True, verbose_name="Current")),
                (
                    "created_by",
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
                        related_name="exercises",
                        to="users.patient",
                        verbose_name="Patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Exercise prescription",
                "verbose_name_plural": "Exercise prescriptions",
                "db_table": "core_patient_exercises",
                "ordering": ("-created_at", "-id"),
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_current", True)),
                        fields=("patient",),
                        name="uniq_current_exercise_per_patient",
                    )
                ],
            },
        ),
    ]
