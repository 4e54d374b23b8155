import pytest

from hashcode_upload.errors import TransportError


class FakeJudge:
    """Records uploads and submissions; blob keys are derived from the file path."""

    def __init__(self, fail_upload=(), fail_submit=()):
        self.fail_upload = set(fail_upload)
        self.fail_submit = set(fail_submit)
        self.uploads = []
        self.submissions = []

    async def upload(self, file_path):
        self.uploads.append(file_path)
        if file_path in self.fail_upload:
            raise TransportError(f"upload of {file_path} failed", 500)
        return f"key-{file_path}"

    async def submit(self, data_set, submission_blob_key, sources_blob_key):
        self.submissions.append((data_set, submission_blob_key, sources_blob_key))
        if data_set in self.fail_submit:
            raise TransportError(f"submission for {data_set} failed", 500)
        return f"ok {data_set}"


@pytest.fixture
def fake_judge():
    return FakeJudge


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with no HASH_CODE_* variables set."""
    import os

    for key in list(os.environ):
        if key.startswith("HASH_CODE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
