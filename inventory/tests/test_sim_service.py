import datetime

from django.test import TestCase

from inventory.models import SimRechargeHistory
from inventory.service import device as device_service
from inventory.service import sim as sim_service
from monitoring.choices import ReminderType
from monitoring.models import Reminder, SimRechargeRef


class SimRechargeTests(TestCase):
    def setUp(self):
        self.sim = sim_service.create_sim({"sim_number": "8991000000000000001", "provider": "jio"})

    def test_recharge_sets_expiry_and_schedules_reminder(self):
        result = sim_service.recharge_sim(
            self.sim.pk,
            datetime.date(2024, 1, 1),
            180,
            today=datetime.date(2024, 1, 1),
        )

        self.assertEqual(result.sim.expiry_date, datetime.date(2024, 6, 29))
        self.assertEqual(result.sim.recharge_duration_days, 180)
        self.assertTrue(result.reminder_created)
        self.assertEqual(result.history.expiry_date, datetime.date(2024, 6, 29))

        reminder = Reminder.objects.get(reminder_type=ReminderType.SIM_RECHARGE)
        self.assertEqual(reminder.due_date, datetime.date(2024, 6, 27))
        self.assertEqual(reminder.title, "SIM Recharge Required")
        self.assertEqual(reminder.reference, SimRechargeRef(self.sim.pk))
        self.assertIn("2024-06-29", reminder.description)

    def test_recharge_replaces_previous_reminder(self):
        sim_service.recharge_sim(self.sim.pk, datetime.date(2024, 1, 1), 30, today=datetime.date(2024, 1, 1))
        sim_service.recharge_sim(self.sim.pk, datetime.date(2024, 1, 25), 30, today=datetime.date(2024, 1, 25))

        reminders = Reminder.objects.filter(reminder_type=ReminderType.SIM_RECHARGE, sim_card=self.sim)
        self.assertEqual(list(reminders.values_list("due_date", flat=True)), [datetime.date(2024, 2, 22)])
        self.assertEqual(SimRechargeHistory.objects.filter(sim_card=self.sim).count(), 2)

    def test_no_reminder_when_due_date_has_passed(self):
        result = sim_service.recharge_sim(
            self.sim.pk, datetime.date(2024, 1, 1), 2, today=datetime.date(2024, 1, 1)
        )
        self.assertFalse(result.reminder_created)
        self.assertFalse(Reminder.objects.exists())

    def test_duration_must_be_positive(self):
        with self.assertRaises(ValueError):
            sim_service.recharge_sim(self.sim.pk, datetime.date(2024, 1, 1), 0)
        self.assertFalse(SimRechargeHistory.objects.exists())

    def test_unknown_sim(self):
        with self.assertRaises(sim_service.SimNotFoundError):
            sim_service.recharge_sim(999999, datetime.date(2024, 1, 1), 30)


class SimExpiryTests(TestCase):
    def test_flags(self):
        today = datetime.date(2024, 6, 27)
        flags = sim_service.sim_expiry_flags

        self.assertEqual(flags(None, today), (False, False))
        self.assertEqual(flags(datetime.date(2024, 6, 26), today), (True, False))
        self.assertEqual(flags(datetime.date(2024, 6, 27), today), (False, True))
        self.assertEqual(flags(datetime.date(2024, 6, 29), today), (False, True))
        self.assertEqual(flags(datetime.date(2024, 6, 30), today), (False, False))

    def test_expiring_lists(self):
        today = datetime.date(2024, 6, 27)
        for number, expiry in (("A", 20), ("B", 28), ("C", 30)):
            sim_service.create_sim(
                {"sim_number": number, "provider": "airtel", "expiry_date": datetime.date(2024, 6, expiry)}
            )
        inactive = sim_service.create_sim(
            {"sim_number": "D", "provider": "airtel", "expiry_date": datetime.date(2024, 6, 28)}
        )
        sim_service.deactivate_sim(inactive.pk)

        self.assertEqual([sim.sim_number for sim in sim_service.expiring_sims(today)], ["B"])
        self.assertEqual(
            [sim.sim_number for sim in sim_service.list_sims(expiring=True, today=today)], ["A", "B"]
        )
        self.assertEqual(len(sim_service.list_sims(provider="jio")), 0)

    def test_duplicate_number_and_unknown_device(self):
        sim_service.create_sim({"sim_number": "A", "provider": "airtel"})
        with self.assertRaises(sim_service.DuplicateSimError):
            sim_service.create_sim({"sim_number": "A", "provider": "jio"})
        with self.assertRaises(sim_service.NotFoundError):
            sim_service.create_sim({"sim_number": "B", "provider": "jio", "linked_device_set_id": 999999})

        device = device_service.create_device_set({"mars_device_id": "M1", "pluto_device_id": "P1"})
        sim = sim_service.create_sim({"sim_number": "C", "provider": "jio", "linked_device_set_id": device.pk})
        self.assertEqual(sim.linked_device_set, device)
