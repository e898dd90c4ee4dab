"""Vercel serverless function for tabulating election files.

POST a JSON body with one of:
    {"url": "https://example.com/election.csv"}
    {"text": "IR\\n4\\nRosen (D), ...", "filename": "election.csv"}
or a multipart form with a `file` field. Both accept the options
    seed:  integer; seeds tie-breaking so a recount repeats the same draws
    audit: true to include the audit trail text in the response
"""

import json
import logging
import random
import sys
from pathlib import Path
from urllib.parse import urlparse

import httpx

# Add the project root to the path so we can import votecount
sys.path.insert(0, str(Path(__file__).parent.parent))

from votecount.analyze import AnalysisError, tabulate_election  # noqa: E402
from votecount.audit import AuditWriter  # noqa: E402
from votecount.report import render_summary  # noqa: E402
from votecount.tiebreak import TieBreaker  # noqa: E402

_log = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0

# Largest election file accepted, inline, uploaded or fetched
MAX_FILE_BYTES = 5 * 1024 * 1024

DEFAULT_FILENAME = "election.csv"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class RequestError(ValueError):
    """A request that cannot be tabulated, with the HTTP status to answer."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.status = status


def handler(request):
    """Tabulate the election file carried by `request`.

    The response holds the parsed election summary and tabulation result
    (`AnalysisResult.to_dict()`), the on-screen summary text, whether the
    draw was seeded, and the audit trail if requested.
    """
    if request.method == "OPTIONS":
        return create_response("", status=204, headers=CORS_HEADERS)
    if request.method != "POST":
        return error_response("Method not allowed. Use POST.", status=405)

    try:
        source, content, options = read_election_request(request)
        seed = parse_seed(options.get("seed"))
        tiebreaker = TieBreaker(random.Random(seed)) if seed is not None else None
        analysis = tabulate_election(source, content, tiebreaker)
    except RequestError as e:
        return error_response(str(e), status=e.status)
    except AnalysisError as e:
        # The file arrived but is not a valid election
        return error_response(str(e), status=422)
    except Exception as e:
        _log.exception(f"Unexpected error tabulating request: {e}")
        return error_response(f"Internal error: {e}", status=500)

    body = analysis.to_dict()
    body["summary"] = render_summary(analysis.result)
    body["seeded"] = seed is not None
    if parse_flag(options.get("audit")):
        body["audit"] = AuditWriter().render(analysis.result)
    return create_response(body)


def read_election_request(request) -> tuple[str, bytes, dict]:
    """Pull the election file and tabulation options out of a request.

    Returns (source, content, options).
    """
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            data = json.loads(request.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise RequestError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RequestError("JSON body must be an object")

        url, text = data.get("url"), data.get("text")
        if url and text is not None:
            raise RequestError("Give either 'url' or 'text', not both")
        if url:
            source, content = fetch_url(url)
        elif isinstance(text, str):
            source, content = data.get("filename") or DEFAULT_FILENAME, text.encode("utf-8")
        else:
            raise RequestError("Missing 'url' or 'text' in request body")
        options = data

    elif "multipart/form-data" in content_type:
        file_data = request.files.get("file")
        if not file_data:
            raise RequestError("Missing 'file' in form data")
        source = request.form.get("filename") or file_data.filename or DEFAULT_FILENAME
        content = file_data.read()
        options = dict(request.form)

    else:
        raise RequestError(f"Unsupported content type: {content_type}", status=415)

    check_size(len(content))
    return source, content, options


def parse_seed(value) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise RequestError("'seed' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RequestError(f"'seed' must be an integer, got {value!r}") from None


def parse_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def check_size(num_bytes: int):
    if num_bytes > MAX_FILE_BYTES:
        raise RequestError(
            f"Election file is {num_bytes} bytes; the limit is {MAX_FILE_BYTES}", status=413,
        )


def fetch_url(url: str) -> tuple[str, bytes]:
    """Download an election file.

    Returns (source_identifier, content_bytes). The URL doubles as the
    source, so a ".csv" path selects the election file parser.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise RequestError(f"Invalid URL scheme: {parsed.scheme}")

    try:
        with httpx.Client(follow_redirects=True, timeout=FETCH_TIMEOUT) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise RequestError(
            f"Election file server answered {e.response.status_code}", status=502,
        ) from e
    except httpx.RequestError as e:
        raise RequestError(f"Could not fetch election file: {e}", status=502) from e

    check_size(len(response.content))
    _log.info(f"Fetched {len(response.content)} bytes from {url}")
    return url, response.content


def error_response(message: str, status: int):
    return create_response({"error": message}, status=status)


def create_response(body, status: int = 200, headers: dict = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
