import io
import unittest
from unittest import mock

import requests

from dayroute.store import JobStoreError, SupabaseJobStore, load_snapshot


def response(payload=None, status_error=None):
    resp = mock.Mock()
    resp.json.return_value = payload
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    return resp


class TestSupabaseJobStore(unittest.TestCase):
    def setUp(self):
        self.session = mock.Mock(spec=requests.Session)
        self.store = SupabaseJobStore("https://example.supabase.co/", "secret", session=self.session)

    def test_fetch_jobs(self):
        self.session.request.return_value = response([
            {"id": 1, "clientId": 7, "suburb": "Buderim", "startTime": "09:00", "duration": "90", "date": "2026-03-02"},
        ])
        jobs = self.store.fetch_jobs("2026-03-02")

        self.assertEqual(len(jobs), 1)
        self.assertEqual((jobs[0].id, jobs[0].client_id, jobs[0].duration), ("1", "7", 90))
        method, url = self.session.request.call_args[0]
        kwargs = self.session.request.call_args[1]
        self.assertEqual(method, "GET")
        self.assertEqual(url, "https://example.supabase.co/rest/v1/scheduled_jobs")
        self.assertEqual(kwargs["params"]["date"], "eq.2026-03-02")
        self.assertEqual(kwargs["headers"]["apikey"], "secret")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer secret")

    def test_fetch_clients(self):
        self.session.request.return_value = response([{"id": "c1", "lat": "-26.6", "lng": "153.0"}])
        clients = self.store.fetch_clients()
        self.assertEqual((clients[0].id, clients[0].lat), ("c1", "-26.6"))

    def test_update_job(self):
        self.session.request.return_value = response()
        self.store.update_job("j1", {"start_time": "08:30"})
        method, url = self.session.request.call_args[0]
        kwargs = self.session.request.call_args[1]
        self.assertEqual(method, "PATCH")
        self.assertEqual(kwargs["params"], {"id": "eq.j1"})
        self.assertEqual(kwargs["json"], {"start_time": "08:30"})
        self.assertEqual(kwargs["headers"]["Prefer"], "return=minimal")

    def test_http_error_raises_job_store_error(self):
        self.session.request.return_value = response(status_error=requests.HTTPError("500 Server Error"))
        with self.assertLogs("dayroute.store", level="WARNING"):
            with self.assertRaises(JobStoreError):
                self.store.update_job("j1", {"start_time": "08:30"})

    def test_connection_error_raises_job_store_error(self):
        self.session.request.side_effect = requests.ConnectionError("refused")
        with self.assertLogs("dayroute.store", level="WARNING"):
            with self.assertRaises(JobStoreError):
                self.store.fetch_jobs("2026-03-02")


    def test_invalid_json_raises_job_store_error(self):
        resp = response()
        resp.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        self.session.request.return_value = resp
        with self.assertLogs("dayroute.store", level="WARNING"):
            with self.assertRaises(JobStoreError):
                self.store.fetch_jobs("2026-03-02")

    def test_bad_records_raise_job_store_error(self):
        for payload in ([{"suburb": "Mons"}], [{"id": "j1", "duration": "90.5"}], {"message": "oops"}):
            self.session.request.return_value = response(payload)
            with self.assertLogs("dayroute.store", level="WARNING"):
                with self.assertRaises(JobStoreError):
                    self.store.fetch_jobs("2026-03-02")

    def test_bad_client_record_raises_job_store_error(self):
        self.session.request.return_value = response([{"name": "No id"}])
        with self.assertLogs("dayroute.store", level="WARNING"):
            with self.assertRaises(JobStoreError):
                self.store.fetch_clients()


class TestLoadSnapshot(unittest.TestCase):
    def test_reads_jobs_and_clients(self):
        fp = io.StringIO(
            '{"jobs": [{"id": "j1", "client_id": "c1", "is_break": false}],'
            ' "clients": [{"id": "c1", "suburb": "Mons"}]}'
        )
        jobs, clients = load_snapshot(fp)
        self.assertEqual([job.id for job in jobs], ["j1"])
        self.assertEqual(clients[0].suburb, "Mons")

    def test_missing_id(self):
        with self.assertRaises(ValueError):
            load_snapshot(io.StringIO('{"jobs": [{"suburb": "Mons"}]}'))

    def test_invalid_json(self):
        with self.assertRaises(ValueError):
            load_snapshot(io.StringIO("not json"))


if __name__ == "__main__":
    unittest.main()
