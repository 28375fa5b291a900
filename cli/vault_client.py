"""HTTP client for communicating with the MediaVault server."""

import mimetypes
import time
import uuid
from contextlib import ExitStack
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from common.constants import MAX_FILE_BYTES, NAMESPACE_FORM_FIELD
from common.logging_config import get_logger
from cli.config import Config
from cli.constants import GREEN, RED, RESET
from cli.utils import collect_upload_files, format_file_size

logger = get_logger(__name__)


class VaultClient:
    """HTTP client for the MediaVault API with retry logic and error handling."""

    def __init__(self, config: Config, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize vault client.

        Args:
            config: Configuration instance
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            transport=transport,
        )
        self.request_id = None
        logger.info(f"Initialized VaultClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, total_size: int) -> float:
        """
        Calculate timeout for an upload batch based on its size.

        Args:
            total_size: Batch size in bytes

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        base_timeout = 30.0
        size_mb = total_size / (1024 * 1024)
        return base_timeout + size_mb * 0.1

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} "
                    f"[request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} "
                        f"[request_id={self.request_id}]"
                    )
                    return response

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s "
                        f"[request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s "
                        f"[request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Network error (max retries exceeded): {method} {endpoint} error={e} "
                    f"[request_id={self.request_id}]"
                )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        if isinstance(last_exception, httpx.ConnectError):
            raise ConnectionError("Cannot connect to MediaVault server. Is it running?")
        raise ConnectionError("Max retries exceeded")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except (ValueError, AttributeError):
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        error_messages = {
            'INVALID_NAMESPACE': f'Invalid user: {detail}. Run: user <name>',
            'EMPTY_BATCH': 'No files were sent.',
            'FILE_TOO_LARGE': f'File too large: {detail}',
            'NAMESPACE_NOT_FOUND': 'Nothing has been uploaded for this user yet.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            404: 'Not found',
            413: 'File too large',
            500: 'Server error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def _require_user(self) -> str:
        """
        Get the selected namespace.

        Raises:
            ValueError: If no user has been chosen yet
        """
        user = self.config.get_user()
        if not user:
            raise ValueError("No user selected. Please run: user <name>")
        return user

    def upload(self, paths: list[str]) -> str:
        """
        Upload files and folders as one batch.

        Args:
            paths: Local files or folders; folders keep their structure

        Returns:
            Formatted result message with the outcome of each file
        """
        try:
            user = self._require_user()
        except ValueError as e:
            return f"Error: {e}"

        pairs, errors = collect_upload_files(paths)
        results = [f"Error: {message}" for message in errors]

        sendable = []
        for local_path, upload_name in pairs:
            size = local_path.stat().st_size
            if size > MAX_FILE_BYTES:
                results.append(
                    f"Skipped: {upload_name} ({format_file_size(size)} exceeds "
                    f"{format_file_size(MAX_FILE_BYTES)})"
                )
                continue
            sendable.append((local_path, upload_name, size))

        if not sendable:
            results.append("No files uploaded.")
            return '\n'.join(results)

        total_size = sum(size for _, _, size in sendable)
        logger.info(f"Uploading batch [user={user}] [files={len(sendable)}] [bytes={total_size}]")
        print(f"Uploading {len(sendable)} file(s), {format_file_size(total_size)}...")

        try:
            with ExitStack() as stack:
                files = []
                for local_path, upload_name, _ in sendable:
                    mime_type = mimetypes.guess_type(upload_name)[0] or 'application/octet-stream'
                    handle = stack.enter_context(open(local_path, 'rb'))
                    files.append(('files', (upload_name, handle, mime_type)))

                response = self.session.post(
                    '/upload',
                    files=files,
                    data={NAMESPACE_FORM_FIELD: user},
                    timeout=self._calculate_upload_timeout(total_size),
                    headers={'X-Request-ID': str(uuid.uuid4())},
                )
        except httpx.ConnectError:
            results.append("Error: Cannot connect to MediaVault server. Is it running?")
            return '\n'.join(results)
        except httpx.TimeoutException:
            results.append(
                f"Error: Upload timed out (batch size: {format_file_size(total_size)})"
            )
            return '\n'.join(results)
        except OSError as e:
            results.append(f"Error reading file: {e}")
            return '\n'.join(results)

        if response.status_code != 200:
            results.append(f"Error: {self._format_error(response)}")
            return '\n'.join(results)

        data = response.json()
        for item in data['results']:
            if item['ok']:
                record = item['record']
                results.append(
                    f"{GREEN}Added:{RESET} {record['relative_path']} "
                    f"({record['detected_mime_type']}, {format_file_size(record['size_bytes'])})"
                )
            else:
                error = item['error']
                results.append(f"{RED}Rejected:{RESET} {item['file']} [{error['code']}] {error['detail']}")

        results.append(f"Accepted {data['accepted']}, rejected {data['rejected']}.")
        return '\n'.join(results)

    def list_files(self, query: str = "", type_prefix: str = "") -> str:
        """
        List the selected user's files.

        Args:
            query: Substring of the original filename (empty = all)
            type_prefix: Prefix of the detected MIME type (empty = all)

        Returns:
            Formatted list of files
        """
        try:
            user = self._require_user()
        except ValueError as e:
            return f"Error: {e}"

        params = {'username': user, 'q': query, 'type': type_prefix}

        try:
            response = self._request_with_retry('GET', '/search', params=params)
        except ConnectionError as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        files = response.json()
        if not files:
            return f"No files found for {user}."

        output = [f"Found {len(files)} file(s):\n"]
        for record in files:
            preview = record.get('preview_url') or '-'
            output.append(
                f"  - {record['relative_path']} (ID: {record['id']})\n"
                f"    Type: {record['detected_mime_type']}\n"
                f"    Size: {format_file_size(record['size_bytes'])}\n"
                f"    Preview: {preview}"
            )
        return '\n'.join(output)

    def export(self, output_path: Optional[str] = None) -> str:
        """
        Download the selected user's files as a zip archive.

        Args:
            output_path: Destination file or folder (defaults to ./<user>.zip)

        Returns:
            Success message with archive details
        """
        try:
            user = self._require_user()
        except ValueError as e:
            return f"Error: {e}"

        output_file = Path(output_path).expanduser() if output_path else Path(f"{user}.zip")
        if output_file.is_dir():
            output_file = output_file / f"{user}.zip"

        try:
            with self.session.stream('GET', f"/zip/{quote(user, safe='')}") as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error: {self._format_error(response)}"

                output_file.parent.mkdir(parents=True, exist_ok=True)
                downloaded = 0
                with open(output_file, 'wb') as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
                        downloaded += len(chunk)

        except httpx.ConnectError:
            return "Error: Cannot connect to MediaVault server. Is it running?"
        except httpx.TimeoutException:
            return "Error: Request timed out. Server may be overloaded."
        except OSError as e:
            return f"Error writing file: {e}"

        logger.info(f"Exported archive [user={user}] [bytes={downloaded}] [path={output_file}]")
        return f"Exported: {user}.zip ({format_file_size(downloaded)})\nSaved to: {output_file.absolute()}"

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
