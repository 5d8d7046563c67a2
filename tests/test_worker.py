"""Tests for the single-slot inference worker."""

import threading

import pytest

from antbee_classifier.worker import InferenceWorker, WorkerBusy


class TestInferenceWorker:
    """Test busy guard and completion notification."""

    def test_returns_result(self):
        worker = InferenceWorker(lambda x: x * 2)
        try:
            assert worker.submit(21).result(timeout=5) == 42
        finally:
            worker.shutdown()

    def test_rejects_second_job_while_busy(self):
        release = threading.Event()
        worker = InferenceWorker(lambda: release.wait(5))
        try:
            future = worker.submit()
            assert worker.busy
            with pytest.raises(WorkerBusy):
                worker.submit()
            release.set()
            future.result(timeout=5)
        finally:
            release.set()
            worker.shutdown()

    def test_ready_again_when_result_published(self):
        worker = InferenceWorker(lambda x: x)
        try:
            worker.submit(1).result(timeout=5)
            assert not worker.busy
            assert worker.submit(2).result(timeout=5) == 2
        finally:
            worker.shutdown()

    def test_on_done_called_once_after_release(self):
        worker = InferenceWorker(lambda: "done")
        seen = []
        done = threading.Event()

        def on_done(future):
            seen.append((future.result(), worker.busy))
            done.set()

        try:
            worker.submit(on_done=on_done)
            assert done.wait(5)
            assert seen == [("done", False)]
        finally:
            worker.shutdown()

    def test_failure_propagates_and_releases(self):
        def boom():
            raise ValueError("bad input")

        worker = InferenceWorker(boom)
        try:
            future = worker.submit()
            with pytest.raises(ValueError, match="bad input"):
                future.result(timeout=5)
            assert not worker.busy
        finally:
            worker.shutdown()
