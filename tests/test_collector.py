"""Tests for mac_backup_helper.services.collector_service."""
import os
import subprocess
import tempfile
import unittest
from unittest import mock

from mac_backup_helper.core.constants import PLACEHOLDER_TEXT
from mac_backup_helper.core.errors import CollectorError
from mac_backup_helper.core.models import Entry
from mac_backup_helper.services import collector_service as collector
from mac_backup_helper.services import report_service as report


class TestParseDuOutput(unittest.TestCase):
    def test_tabs_spaces_and_junk(self) -> None:
        text = "1024\t/a\nbad line\n-5\t/b\n12 /c d\n\n7\t/with\ttab\n"
        self.assertEqual(collector.parse_du_output(text), [
            (1024, "/a"),
            (0, "/b"),
            (12, "/c d"),
            (7, "/with\ttab"),
        ])


class TestFilterRecords(unittest.TestCase):
    def test_threshold_is_inclusive_and_root_sets_total(self) -> None:
        records = [(5, "/R/a"), (10, "/R/b"), (9, "/R/c"), (30, "/R")]
        batch = collector.filter_records("/R", records, 10)
        self.assertEqual(batch.entries, [Entry("/R/b", 10), Entry("/R", 30)])
        self.assertEqual(batch.root_total_kb, 30)

    def test_empty_batch_keeps_root_total(self) -> None:
        batch = collector.filter_records("/R", [(3, "/R/a"), (4, "/R")], 1_000_000)
        self.assertEqual(batch.entries, [])
        self.assertEqual(batch.root_total_kb, 4)


class TestCollectSizes(unittest.TestCase):
    def test_runs_du_with_all_files_and_one_filesystem(self) -> None:
        with mock.patch.object(collector, "_run_du", return_value="2000000\t/R/big\n2500000\t/R\n") as run:
            batch = collector.collect_sizes("/R", 1_000_000, one_filesystem=True, timeout=60)
        run.assert_called_once_with(["-a", "-k", "-x", "/R"], 60)
        self.assertEqual(batch.root, "/R")
        self.assertEqual([e.path for e in batch.entries], ["/R/big", "/R"])
        self.assertEqual(batch.root_total_kb, 2_500_000)

    def test_queries_root_total_when_du_omits_it(self) -> None:
        outputs = ["10\t/R/small\n", "40\t/R\n"]
        with mock.patch.object(collector, "_run_du", side_effect=outputs) as run:
            batch = collector.collect_sizes("/R", 1_000_000, one_filesystem=False, timeout=60)
        self.assertEqual(run.call_args_list[1].args, (["-s", "-k", "/R"], 60))
        self.assertEqual(batch.entries, [])
        self.assertEqual(batch.root_total_kb, 40)

    def test_missing_total_is_an_error(self) -> None:
        with mock.patch.object(collector, "_run_du", return_value=""):
            with self.assertRaises(CollectorError):
                collector.measure_root_kb("/R")


class TestRunDu(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.object(collector, "_find_du", return_value="/usr/bin/du")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _completed(self, returncode, stdout="", stderr=""):
        return subprocess.CompletedProcess(["du"], returncode, stdout=os.fsencode(stdout), stderr=os.fsencode(stderr))

    def test_partial_output_survives_permission_errors(self) -> None:
        proc = self._completed(1, "5\t/R\n", "du: /R/private: Permission denied")
        with mock.patch.object(collector.subprocess, "run", return_value=proc):
            self.assertEqual(collector._run_du(["-s", "-k", "/R"], 10), "5\t/R\n")

    def test_failure_without_output(self) -> None:
        proc = self._completed(1, "", "du: /R: No such file or directory")
        with mock.patch.object(collector.subprocess, "run", return_value=proc):
            with self.assertRaises(CollectorError) as ctx:
                collector._run_du(["-s", "-k", "/R"], 10)
        self.assertIn("No such file", str(ctx.exception))

    def test_timeout(self) -> None:
        with mock.patch.object(collector.subprocess, "run", side_effect=subprocess.TimeoutExpired("du", 10)):
            with self.assertRaises(CollectorError):
                collector._run_du(["-s", "-k", "/R"], 10)

    def test_du_not_found(self) -> None:
        with mock.patch.object(collector, "_find_du", return_value=None):
            with self.assertRaises(CollectorError):
                collector._run_du(["-s", "-k", "/R"], 10)

    def test_undecodable_names_keep_their_bytes(self) -> None:
        out = b"1200\t/R/a\xfe\n1200\t/R/a\xff\n2400\t/R\n"
        proc = subprocess.CompletedProcess(["du"], 0, stdout=out, stderr=b"")
        with mock.patch.object(collector.subprocess, "run", return_value=proc):
            records = collector.parse_du_output(collector._run_du(["-a", "-k", "/R"], 10))
        self.assertEqual([os.fsencode(p) for _, p in records], [b"/R/a\xfe", b"/R/a\xff", b"/R"])


class TestUndecodableFolders(unittest.TestCase):
    def test_sibling_folders_stay_apart_and_get_placeholders(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = os.fsencode(tmp)
            try:
                for name in (b"a\xfe", b"a\xff"):
                    os.mkdir(os.path.join(root, name))
            except OSError:
                self.skipTest("filesystem rejects names that are not UTF-8")
            out = b"".join(b"1200\t%s\n" % os.path.join(root, n) for n in (b"a\xfe", b"a\xff"))
            out += b"2400\t%s\n" % root
            proc = subprocess.CompletedProcess(["du"], 0, stdout=out, stderr=b"")
            with mock.patch.object(collector, "_find_du", return_value="/usr/bin/du"), \
                    mock.patch.object(collector.subprocess, "run", return_value=proc):
                batch = collector.collect_sizes(tmp, 1000, one_filesystem=False)
            lines = report.render_batch(batch)

        labels = [os.fsencode(l.label) for l in lines if not l.placeholder]
        self.assertEqual(labels, [root, os.path.join(root, b"a\xfe"), os.path.join(root, b"a\xff")])
        self.assertEqual(sum(1 for l in lines if l.label == PLACEHOLDER_TEXT), 2)


if __name__ == "__main__":
    unittest.main()
