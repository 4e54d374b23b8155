"""
HTTP client for the Hash Code judge.

The judge API is driven with a blocking `requests.Session`; each call is
pushed to a worker thread so several uploads or submissions can be awaited
together from one event loop.
"""

import asyncio
import os
from typing import Optional

import requests

from hashcode_upload.config import JudgeConfig
from hashcode_upload.errors import ResponseFormatError, TransportError
from hashcode_upload.util.log import get_logger
from hashcode_upload.util.utils import shorten

logger = get_logger(__name__)


class JudgeClient:
    def __init__(self, config: JudgeConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.headers = {"Authorization": f"Bearer {config.auth_token}"}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.cleanup()

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(
                method, url, headers=self.headers, timeout=self.config.timeout, **kwargs
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {shorten(url)} failed: {type(exc).__name__}") from exc

        status = response.status_code
        if not 200 <= status < 300:
            raise TransportError(f"{method} {shorten(url)} returned HTTP {status}: {response.text}", status)
        return response

    @staticmethod
    def _json(response: requests.Response) -> dict:
        try:
            body = response.json()
        except ValueError as exc:
            raise ResponseFormatError(f"expected a JSON body, got: {response.text[:200]}") from exc
        if not isinstance(body, dict):
            raise ResponseFormatError(f"expected a JSON object, got {type(body).__name__}")
        return body

    def _create_upload_url(self) -> str:
        body = self._json(self._request("GET", self.config.create_url_uri))
        upload_uri = body.get("value")
        if not isinstance(upload_uri, str) or not upload_uri:
            raise ResponseFormatError("createUrl response has no 'value'")
        return upload_uri

    def _upload_to(self, upload_uri: str, file_path: str) -> str:
        logger.debug(f"uploading {file_path} to {shorten(upload_uri)}")
        with open(file_path, "rb") as fh:
            files = {"file": (os.path.basename(file_path), fh)}
            body = self._json(self._request("POST", upload_uri, files=files))

        keys = body.get("file")
        if not isinstance(keys, list) or not keys or not isinstance(keys[0], str):
            raise ResponseFormatError(f"upload response for {file_path} has no 'file' blob key")
        blob_key = keys[0]
        logger.debug(f"uploaded {file_path} (key: {shorten(blob_key)})")
        return blob_key

    def _submit(self, data_set: str, submission_blob_key: str, sources_blob_key: str) -> str:
        params = {
            "dataSet": data_set,
            "submissionBlobKey": submission_blob_key,
            "sourcesBlobKey": sources_blob_key,
        }
        return self._request("POST", self.config.submit_uri, params=params).text

    async def create_upload_url(self) -> str:
        """Ask the judge for a single-use upload destination."""
        return await asyncio.to_thread(self._create_upload_url)

    async def upload(self, file_path: str) -> str:
        """Upload one local file and return its blob key."""
        upload_uri = await self.create_upload_url()
        return await asyncio.to_thread(self._upload_to, upload_uri, file_path)

    async def submit(self, data_set: str, submission_blob_key: str, sources_blob_key: str) -> str:
        """Register a submission for a data set and return the judge's raw acknowledgement."""
        return await asyncio.to_thread(self._submit, data_set, submission_blob_key, sources_blob_key)

    async def cleanup(self):
        """Close the underlying HTTP session"""
        if self.session is None:
            return
        try:
            self.session.close()
        finally:
            self.session = None
