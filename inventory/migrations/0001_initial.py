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
            name="DeviceSet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("set_number", models.PositiveIntegerField(unique=True, verbose_name="Set number")),
                ("mars_device_id", models.CharField(max_length=50, unique=True, verbose_name="MARS device ID")),
                ("pluto_device_id", models.CharField(max_length=50, unique=True, verbose_name="PLUTO device ID")),
                ("laptop_number", models.CharField(blank=True, max_length=50, verbose_name="Laptop")),
                ("modem_serial", models.CharField(blank=True, max_length=50, verbose_name="Modem serial")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("in_use", "In use"),
                            ("under_maintenance", "Under maintenance"),
                        ],
                        db_index=True,
                        default="available",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("assignment_date", models.DateTimeField(blank=True, null=True, verbose_name="Assigned at")),
                ("expected_return_date", models.DateTimeField(blank=True, null=True, verbose_name="Expected return")),
                ("return_date", models.DateTimeField(blank=True, null=True, verbose_name="Returned at")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "assigned_patient",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="device_sets",
                        to="users.patient",
                        verbose_name="Assigned patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Device set",
                "verbose_name_plural": "Device sets",
                "db_table": "inventory_device_sets",
                "ordering": ("set_number",),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("assigned_patient__isnull", False), ("status", "in_use")),
                            models.Q(models.Q(("status", "in_use"), _negated=True), ("assigned_patient__isnull", True)),
                            _connector="OR",
                        ),
                        name="device_assigned_iff_in_use",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status", "in_use")),
                        fields=("assigned_patient",),
                        name="uniq_in_use_device_per_patient",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ActigraphWatch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("name", models.CharField(max_length=50, unique=True, verbose_name="Name")),
                ("left_serial", models.CharField(max_length=50, verbose_name="Left serial")),
                ("right_serial", models.CharField(max_length=50, verbose_name="Right serial")),
                ("is_backup", models.BooleanField(db_index=True, default=False, verbose_name="Backup")),
                ("assignment_date", models.DateTimeField(blank=True, null=True, verbose_name="Assigned at")),
                (
                    "assigned_patient",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="watches",
                        to="users.patient",
                        verbose_name="Assigned patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "Actigraph watch",
                "verbose_name_plural": "Actigraph watches",
                "db_table": "inventory_actigraph_watches",
                "ordering": ("name",),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("assigned_patient__isnull", False), ("is_backup", True), _negated=True
                        ),
                        name="watch_backup_not_assigned",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="SimCard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("sim_number", models.CharField(max_length=30, unique=True, verbose_name="SIM number")),
                (
                    "provider",
                    models.CharField(choices=[("airtel", "Airtel"), ("jio", "Jio")], max_length=10, verbose_name="Provider"),
                ),
                ("modem_number", models.CharField(blank=True, max_length=50, verbose_name="Modem number")),
                ("recharge_date", models.DateField(blank=True, null=True, verbose_name="Last recharge")),
                (
                    "recharge_duration_days",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="Recharge duration (days)"),
                ),
                ("expiry_date", models.DateField(blank=True, db_index=True, null=True, verbose_name="Expiry")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "linked_device_set",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sim_cards",
                        to="inventory.deviceset",
                        verbose_name="Device set",
                    ),
                ),
            ],
            options={
                "verbose_name": "SIM card",
                "verbose_name_plural": "SIM cards",
                "db_table": "inventory_sim_cards",
                "ordering": ("sim_number",),
            },
        ),
        migrations.CreateModel(
            name="SimRechargeHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("recharge_date", models.DateField(verbose_name="Recharge date")),
                ("duration_days", models.PositiveIntegerField(verbose_name="Duration (days)")),
                ("expiry_date", models.DateField(verbose_name="Expiry")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
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
                    "sim_card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="recharge_history",
                        to="inventory.simcard",
                    ),
                ),
            ],
            options={
                "verbose_name": "SIM recharge",
                "verbose_name_plural": "SIM recharge history",
                "db_table": "inventory_sim_recharge_history",
                "ordering": ("-recharge_date", "-id"),
            },
        ),
    ]
