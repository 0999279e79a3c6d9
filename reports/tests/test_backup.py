import datetime
import io
import json
import tempfile
from unittest import mock

import requests
from django.core.management import call_command
from django.test import TestCase, override_settings

from reports.services import backup
from users import choices
from users.models import Patient


class FileBackupStorageTests(TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.storage = backup.FileBackupStorage(self.tmp.name)
        Patient.objects.create(
            patient_code="INT-001",
            age=70,
            affected_hand=choices.AffectedHand.LEFT,
            group_type=choices.GroupType.INTERVENTION,
            study_start_date=datetime.date(2024, 1, 15),
            enrollment_date=datetime.date(2024, 1, 10),
        )

    def test_backup_round_trip(self):
        backup.create_backup(self.storage, day=datetime.date(2024, 5, 1))
        backup.create_backup(self.storage, day=datetime.date(2024, 5, 2))

        names = [item.name for item in self.storage.list()]
        self.assertEqual(names, ["homer_backup_2024-05-02.json", "homer_backup_2024-05-01.json"])

        name, data = backup.load_backup(self.storage)
        self.assertEqual(name, "homer_backup_2024-05-02.json")
        self.assertEqual(data["patients"][0]["patient_code"], "INT-001")

    def test_missing_and_foreign_files(self):
        with self.assertRaises(backup.BackupNotFoundError):
            self.storage.download()
        with self.assertRaises(backup.BackupNotFoundError):
            self.storage.download("../etc/passwd")

    def test_management_command_uses_configured_directory(self):
        config = {"BACKEND": "file", "DIRECTORY": self.tmp.name}
        with override_settings(BACKUP_CONFIG=config):
            call_command("backup_data", stdout=io.StringIO())
        self.assertEqual(len(self.storage.list()), 1)


def _response(status_code=200, payload=None, content=b""):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    response.content = content
    response.text = json.dumps(payload or {})
    return response


class DropboxBackupStorageTests(TestCase):
    def setUp(self):
        self.storage = backup.DropboxBackupStorage(
            access_token="token",
            api_url="https://api.example.test/2",
            content_url="https://content.example.test/2",
            timeout=5,
        )

    def test_requires_token(self):
        with self.assertRaises(backup.BackupNotConfiguredError):
            backup.DropboxBackupStorage("", "https://a", "https://b")

    @mock.patch("reports.services.backup.requests.post")
    def test_upload_sends_dropbox_arg(self, post):
        post.return_value = _response(payload={"path_lower": "/homer_backup_2024-05-01.json"})

        path = self.storage.upload("homer_backup_2024-05-01.json", b"{}")

        self.assertEqual(path, "/homer_backup_2024-05-01.json")
        url = post.call_args.args[0]
        headers = post.call_args.kwargs["headers"]
        self.assertEqual(url, "https://content.example.test/2/files/upload")
        self.assertEqual(headers["Authorization"], "Bearer token")
        self.assertEqual(json.loads(headers["Dropbox-API-Arg"])["mode"], "overwrite")

    @mock.patch("reports.services.backup.requests.post")
    def test_list_keeps_backup_files_newest_first(self, post):
        post.return_value = _response(
            payload={
                "entries": [
                    {".tag": "file", "name": "homer_backup_2024-05-01.json", "size": 10},
                    {".tag": "file", "name": "notes.txt", "size": 1},
                    {".tag": "folder", "name": "homer_backup_old.json"},
                    {
                        ".tag": "file",
                        "name": "homer_backup_2024-05-03.json",
                        "size": 12,
                        "server_modified": "2024-05-03T10:00:00Z",
                    },
                ]
            }
        )

        files = self.storage.list()

        self.assertEqual([item.name for item in files], ["homer_backup_2024-05-03.json", "homer_backup_2024-05-01.json"])
        self.assertEqual(files[0].modified, datetime.datetime(2024, 5, 3, 10, tzinfo=datetime.timezone.utc))

    @mock.patch("reports.services.backup.requests.post")
    def test_list_follows_cursor(self, post):
        post.side_effect = [
            _response(
                payload={
                    "entries": [{".tag": "file", "name": "homer_backup_2024-05-01.json"}],
                    "has_more": True,
                    "cursor": "page-2",
                }
            ),
            _response(
                payload={
                    "entries": [{".tag": "file", "name": "homer_backup_2024-05-02.json"}],
                    "has_more": False,
                }
            ),
        ]

        files = self.storage.list()

        self.assertEqual([item.name for item in files], ["homer_backup_2024-05-02.json", "homer_backup_2024-05-01.json"])
        second = post.call_args_list[1]
        self.assertEqual(second.args[0], "https://api.example.test/2/files/list_folder/continue")
        self.assertEqual(second.kwargs["json"], {"cursor": "page-2"})

    @mock.patch("reports.services.backup.requests.post")
    def test_download_latest(self, post):
        post.side_effect = [
            _response(payload={"entries": [{".tag": "file", "name": "homer_backup_2024-05-01.json"}]}),
            _response(content=b'{"patients": []}'),
        ]

        name, data = backup.load_backup(self.storage)

        self.assertEqual(name, "homer_backup_2024-05-01.json")
        self.assertEqual(data, {"patients": []})

    @mock.patch("reports.services.backup.requests.post")
    def test_transport_errors(self, post):
        post.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(backup.BackupError):
            self.storage.list()

        post.side_effect = None
        post.return_value = _response(status_code=409)
        with self.assertRaises(backup.BackupNotFoundError):
            self.storage.download("homer_backup_2024-01-01.json")

        post.return_value = _response(status_code=500)
        with self.assertRaises(backup.BackupError):
            self.storage.upload("homer_backup_2024-01-01.json", b"{}")
