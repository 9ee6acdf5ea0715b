"""Tests for handing links off to the desktop."""

import subprocess

from redditview import external


class FakeProcess:
    def __init__(self, command, **kwargs):
        self.command = command
        self.kwargs = kwargs
        self.returncode = None

    def poll(self):
        return self.returncode


def fake_popen(created, missing=()):
    def popen(command, **kwargs):
        if command[0] in missing:
            raise FileNotFoundError(command[0])
        process = FakeProcess(command, **kwargs)
        created.append(process)
        return process

    return popen


def test_open_url_detaches_and_reaps(monkeypatch):
    created = []
    monkeypatch.setattr(external.sys, "platform", "linux")
    monkeypatch.setattr(external.subprocess, "Popen", fake_popen(created))
    monkeypatch.setattr(external, "_openers", [])

    assert external.open_url("https://reddit.com/r/golang/") == "xdg-open"
    assert created[0].kwargs["start_new_session"] is True
    assert created[0].kwargs["stdout"] is subprocess.DEVNULL
    assert external.reap_openers() == 1

    created[0].returncode = 0
    external.open_url("https://example.com/")
    assert external._openers == [created[1]]
    created[1].returncode = 0
    assert external.reap_openers() == 0


def test_open_url_falls_back_to_next_opener(monkeypatch):
    created = []
    monkeypatch.setattr(external.sys, "platform", "linux")
    monkeypatch.setattr(external.subprocess, "Popen", fake_popen(created, missing=("xdg-open",)))
    monkeypatch.setattr(external, "_openers", [])

    assert external.open_url("https://example.com/") == "sensible-browser"
    assert external.open_url("") is None
    assert len(created) == 1


def test_open_url_without_any_opener(monkeypatch):
    monkeypatch.setattr(external.sys, "platform", "linux")
    monkeypatch.setattr(external.subprocess, "Popen", fake_popen([], missing=("xdg-open", "sensible-browser")))
    monkeypatch.setattr(external, "_openers", [])
    assert external.open_url("https://example.com/") is None
