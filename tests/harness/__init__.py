"""Test doubles for wolfi-devkit workflow tests."""

from tests.harness.fake_runner import FakeRunner, RecordedCall, ScriptedResponse
from tests.harness.paths import list_sandboxes
from tests.harness.probe_server import ProbeServer

__all__ = [
    "FakeRunner",
    "ProbeServer",
    "RecordedCall",
    "ScriptedResponse",
    "list_sandboxes",
]
