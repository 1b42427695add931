"""
Authentication for the Upload Gateway.
Accepts a shared API key or a basic-auth pair, from headers or form fields.

Secrets are compared with plain string equality.
"""

import base64
import binascii
import logging
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import FormData

from upload_gateway.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
BASIC_PREFIX = "Basic "

# Form fields checked against API_KEY, in order
FORM_API_KEY_FIELDS = ("apiKey", "token")


class AuthMethod(str, Enum):
    """Enum for the credential that authenticated a request."""
    API_KEY = "api_key"
    BASIC = "basic"
    FORM_API_KEY = "form_api_key"
    FORM_CREDENTIALS = "form_credentials"


class FormParseResult(NamedTuple):
    """Outcome of parsing the request body: either a form or the parse error."""
    form: Optional[FormData] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.form is not None


async def read_form(request: Request) -> FormParseResult:
    """
    Parse the request body as form data without raising.

    Starlette caches the parsed form on the request, so the upload
    handler reuses this result instead of reading the body twice.
    """
    try:
        return FormParseResult(form=await request.form())
    except Exception as e:
        return FormParseResult(error=e)


def check_api_key(candidate: Optional[str], settings: Settings) -> bool:
    """True if both the candidate and the configured key are set and equal."""
    if not candidate or not settings.API_KEY:
        return False
    return candidate == settings.API_KEY


def check_credentials(
    username: Optional[str],
    password: Optional[str],
    settings: Settings
) -> bool:
    """True if username/password equal the configured basic-auth pair."""
    if not settings.BASIC_AUTH_USERNAME or not settings.BASIC_AUTH_PASSWORD:
        return False
    if not username or not password:
        return False
    return (
        username == settings.BASIC_AUTH_USERNAME and
        password == settings.BASIC_AUTH_PASSWORD
    )


def parse_basic_authorization(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Decode an `Authorization: Basic ...` header.

    Args:
        header: Raw Authorization header value

    Returns:
        (username, password) split on the first colon, or None if the
        header is missing, not Basic, or malformed
    """
    if not header or not header.startswith(BASIC_PREFIX):
        return None

    try:
        decoded = base64.b64decode(header[len(BASIC_PREFIX):], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def _form_value(form: FormData, field: str) -> Optional[str]:
    value = form.get(field)
    return value if isinstance(value, str) else None


async def authenticate(request: Request, settings: Settings) -> Optional[AuthMethod]:
    """
    Decide whether a request carries valid credentials.

    Order: X-API-Key header, Basic Authorization header, then (POST only)
    form fields apiKey/token and username+password.

    Returns:
        AuthMethod that matched, or None
    """
    if check_api_key(request.headers.get(API_KEY_HEADER), settings):
        return AuthMethod.API_KEY

    basic = parse_basic_authorization(request.headers.get("authorization"))
    if basic and check_credentials(basic[0], basic[1], settings):
        return AuthMethod.BASIC

    if request.method == "POST":
        parsed = await read_form(request)
        if not parsed.ok:
            logger.debug(f"Form parse failed during auth: {parsed.error}")
            return None

        for field in FORM_API_KEY_FIELDS:
            if check_api_key(_form_value(parsed.form, field), settings):
                return AuthMethod.FORM_API_KEY

        if check_credentials(
            _form_value(parsed.form, "username"),
            _form_value(parsed.form, "password"),
            settings
        ):
            return AuthMethod.FORM_CREDENTIALS

    return None


async def verify_upload_access(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> AuthMethod:
    """
    FastAPI dependency guarding write endpoints.

    Raises:
        HTTPException: 401 if no credential matched
    """
    method = await authenticate(request, settings)
    if method is None:
        logger.warning(f"Unauthorized {request.method} {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    logger.debug(f"Authenticated via {method.value}")
    return method
