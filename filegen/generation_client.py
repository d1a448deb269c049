"""
Generation client for the file generator.
Sends the schema to the external generation service and manages the
lifecycle of the returned file (creation, download, disposal).
"""

import logging
import threading
from pathlib import Path
from typing import Any, Optional

import requests

from .config_loader import get_config_value
from .exceptions import (
    GenerationFailedError,
    GenerationInProgressError,
    InvalidHandleError,
    ValidationError,
)
from .field_model import (
    DEFAULT_CONTENT_TYPES,
    FileType,
    GenerationRequest,
    coerce_file_size,
    coerce_file_type,
)
from .schema_store import SchemaStore

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_STEM = "generated_file"


class ArtifactHandle:
    """
    Reference to a generated file held in memory.

    A handle is valid until it is released by a download, by a newer
    generation or by session teardown. Reading a released handle raises
    InvalidHandleError.
    """

    def __init__(self, data: bytes, content_type: str, file_type: FileType,
                 filename_stem: str = DEFAULT_FILENAME_STEM):
        self._data: Optional[bytes] = data
        self.content_type = content_type
        self.file_type = file_type
        self.filename_stem = filename_stem

    @property
    def is_valid(self) -> bool:
        return self._data is not None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise InvalidHandleError()
        return self._data

    @property
    def size(self) -> int:
        return len(self._data) if self._data is not None else 0

    @property
    def filename(self) -> str:
        """Download name, fixed to the file type the artifact was generated for."""
        return f"{self.filename_stem}.{self.file_type.value}"

    def release(self) -> None:
        """Drop the in-memory bytes. Releasing twice is harmless."""
        if self._data is not None:
            logger.debug(f"Releasing artifact {self.filename} ({len(self._data)} bytes)")
        self._data = None


class ArtifactSaver:
    """Saves artifact bytes somewhere the user can reach them."""

    def save(self, data: bytes, content_type: str, filename: str) -> str:
        """
        Save the bytes.

        Returns:
            Where the file went (a path or a description)
        """
        raise NotImplementedError


class FileSystemArtifactSaver(ArtifactSaver):
    """Writes artifacts into a local directory."""

    def __init__(self, directory: Optional[Path] = None):
        if directory is None:
            directory = Path(get_config_value('downloads', 'directory', 'downloads'))
        self.directory = Path(directory)

    def save(self, data: bytes, content_type: str, filename: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / filename
        with open(target, 'wb') as f:
            f.write(data)
        logger.info(f"Saved artifact to {target} ({len(data)} bytes, {content_type})")
        return str(target)


class BrowserArtifactSaver(ArtifactSaver):
    """
    Records a download that the browser has already received.

    Used with st.download_button, which streams the bytes itself; saving here
    only marks the transfer as initiated so the handle can be released.
    """

    def __init__(self):
        self.last_filename: Optional[str] = None

    def save(self, data: bytes, content_type: str, filename: str) -> str:
        self.last_filename = filename
        logger.info(f"Browser download initiated: {filename} ({len(data)} bytes, {content_type})")
        return filename


class GenerationClient:
    """Issues generation requests one at a time and owns the current artifact."""

    def __init__(self, base_url: Optional[str] = None, endpoint: Optional[str] = None,
                 timeout: Optional[float] = None, user_agent: Optional[str] = None,
                 session: Optional[requests.Session] = None,
                 saver: Optional[ArtifactSaver] = None,
                 filename_stem: Optional[str] = None):
        self.base_url = (base_url or get_config_value('generation_service', 'base_url', 'http://localhost:5000')).rstrip('/')
        self.endpoint = endpoint or get_config_value('generation_service', 'endpoint', '/api/generate')
        if timeout is None:
            timeout = float(get_config_value('generation_service', 'timeout', 30))
        self.timeout = timeout
        self.user_agent = user_agent or get_config_value('generation_service', 'user_agent', 'FileGenerator/1.0')
        self.filename_stem = filename_stem or get_config_value('downloads', 'filename_stem', DEFAULT_FILENAME_STEM)
        self.saver = saver or FileSystemArtifactSaver()
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._handle: Optional[ArtifactHandle] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.endpoint.lstrip('/')}"

    @property
    def is_generating(self) -> bool:
        return self._lock.locked()

    @property
    def current_handle(self) -> Optional[ArtifactHandle]:
        """The live artifact, if any."""
        if self._handle is not None and not self._handle.is_valid:
            self._handle = None
        return self._handle

    def build_request(self, schema: SchemaStore, file_type: Any, file_size: Any) -> GenerationRequest:
        """Build the request payload from a snapshot of the schema."""
        try:
            parsed_type = coerce_file_type(file_type)
        except ValueError:
            raise ValidationError(f"Unsupported file type '{file_type}'")
        return GenerationRequest.from_fields(schema.fields, parsed_type, coerce_file_size(file_size))

    def generate(self, schema: SchemaStore, file_type: Any, file_size: Any) -> ArtifactHandle:
        """
        Generate a file from the schema.

        Args:
            schema: Schema store to snapshot
            file_type: json, csv or xml
            file_size: Requested size, clamped to 1..1000

        Returns:
            Handle to the generated file; it replaces any previous handle

        Raises:
            EmptySchemaError / NoPrimaryKeyError: schema not ready, nothing sent
            GenerationInProgressError: another generation is in flight
            GenerationFailedError: the service call failed; previous handle kept
        """
        schema.validate_for_generation()

        if not self._lock.acquire(blocking=False):
            logger.warning("Generation requested while another is in flight; rejecting")
            raise GenerationInProgressError()

        try:
            request = self.build_request(schema, file_type, file_size)
            payload = request.to_payload()
            logger.info(f"Requesting {request.file_type.value} file of size {request.file_size} with {len(request.properties)} fields")

            data, content_type = self._post(payload)
            if not content_type:
                content_type = DEFAULT_CONTENT_TYPES[request.file_type]

            handle = ArtifactHandle(data, content_type, request.file_type, self.filename_stem)
            if self._handle is not None:
                self._handle.release()
            self._handle = handle

            logger.info(f"Generated {handle.filename}: {handle.size} bytes ({content_type})")
            return handle
        finally:
            self._lock.release()

    def download(self, handle: ArtifactHandle, saver: Optional[ArtifactSaver] = None) -> str:
        """
        Save the artifact and release it.

        Raises:
            InvalidHandleError: if the handle was already released
        """
        if not handle.is_valid:
            raise InvalidHandleError()

        target = (saver or self.saver).save(handle.data, handle.content_type, handle.filename)
        handle.release()
        if handle is self._handle:
            self._handle = None
        return target

    def teardown(self) -> None:
        """Release the live artifact, if any."""
        if self._handle is not None:
            self._handle.release()
            self._handle = None

    def _post(self, payload):
        headers = {"User-Agent": self.user_agent}
        try:
            response = self._session.post(
                self.url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error generating file: {e}")
            raise GenerationFailedError(f"Error generating file: {e}", original_error=e) from e

        status = response.status_code
        if not 200 <= status < 300:
            logger.error(f"Generation service returned HTTP {status}")
            raise GenerationFailedError(f"Generation service returned HTTP {status}", status_code=status)

        data = response.content
        if not isinstance(data, (bytes, bytearray)) or not data:
            logger.error("Generation service returned an empty or unreadable body")
            raise GenerationFailedError("Generation service returned an empty file", status_code=status)

        content_type = response.headers.get('Content-Type', '')
        return bytes(data), content_type
