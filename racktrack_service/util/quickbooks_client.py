import base64
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import requests
from pydantic import BaseModel
from requests import RequestException

from shared.core.config import settings
from shared.helpers.datetime_helper import as_utc
from shared.utils.logger import get_logger

logger = get_logger(__name__)

AUTHORIZATION_URL = "https://appcenter.intuit.com/connect/oauth2"
TOKEN_URL = "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer"
SANDBOX_BASE_URL = "https://sandbox-quickbooks.api.intuit.com"
PRODUCTION_BASE_URL = "https://quickbooks.api.intuit.com"
SCOPE = "com.intuit.quickbooks.accounting"

TOKEN_EXPIRY_BUFFER = timedelta(minutes=5)


class QuickBooksConfigError(Exception):
    pass


class QuickBooksApiError(Exception):
    def __init__(self, message: str, status_code: int = 502, body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class TokenSet(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: datetime


class CompanyInfo(BaseModel):
    company_id: str
    company_name: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None


def validate_config():
    if not settings.QUICKBOOKS_CLIENT_ID:
        raise QuickBooksConfigError("QUICKBOOKS_CLIENT_ID is not configured")
    if not settings.QUICKBOOKS_CLIENT_SECRET:
        raise QuickBooksConfigError("QUICKBOOKS_CLIENT_SECRET is not configured")


def get_base_url() -> str:
    return SANDBOX_BASE_URL if settings.is_sandbox else PRODUCTION_BASE_URL


def get_authorization_url(state: str) -> str:
    validate_config()
    params = {
        "client_id": settings.QUICKBOOKS_CLIENT_ID,
        "scope": SCOPE,
        "redirect_uri": settings.QUICKBOOKS_REDIRECT_URI,
        "response_type": "code",
        "state": state,
    }
    return f"{AUTHORIZATION_URL}?{urlencode(params)}"


def is_token_expired(expires_at: Optional[datetime]) -> bool:
    """True when the token is gone or has less than five minutes left."""
    if expires_at is None:
        return True
    return as_utc(expires_at) - datetime.now(timezone.utc) < TOKEN_EXPIRY_BUFFER


def _basic_auth_header() -> str:
    raw = f"{settings.QUICKBOOKS_CLIENT_ID}:{settings.QUICKBOOKS_CLIENT_SECRET}"
    return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")


def _token_request(form: Dict[str, str]) -> TokenSet:
    validate_config()
    try:
        response = requests.post(
            TOKEN_URL,
            data=form,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded",
                "Authorization": _basic_auth_header(),
            },
            timeout=settings.QUICKBOOKS_TIMEOUT_SECONDS,
        )
    except RequestException as e:
        logger.error(f"QuickBooks token endpoint unreachable: {e}")
        raise QuickBooksApiError(f"QuickBooks token request failed: {e}") from e

    if not response.ok:
        logger.error(
            f"QuickBooks token request failed ({form.get('grant_type')}): {response.status_code}")
        raise QuickBooksApiError(
            f"QuickBooks token request failed: {response.status_code} {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    payload = response.json()
    return TokenSet(
        access_token=payload["access_token"],
        refresh_token=payload["refresh_token"],
        expires_at=datetime.now(timezone.utc) +
        timedelta(seconds=int(payload.get("expires_in", 3600))),
    )


def exchange_code_for_tokens(code: str) -> TokenSet:
    return _token_request({
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": settings.QUICKBOOKS_REDIRECT_URI,
    })


def refresh_access_token(refresh_token: str) -> TokenSet:
    tokens = _token_request({
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
    })
    logger.info("QuickBooks access token refreshed")
    return tokens


def get_company_info(access_token: str, realm_id: str) -> CompanyInfo:
    url = f"{get_base_url()}/v3/company/{realm_id}/companyinfo/{realm_id}"
    try:
        response = requests.get(
            url,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {access_token}",
            },
            timeout=settings.QUICKBOOKS_TIMEOUT_SECONDS,
        )
    except RequestException as e:
        raise QuickBooksApiError(f"QuickBooks API error: {e}") from e

    if not response.ok:
        raise QuickBooksApiError(
            f"QuickBooks API error: {response.status_code} {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    info = response.json().get("CompanyInfo", {})
    return CompanyInfo(
        company_id=str(info.get("Id") or realm_id),
        company_name=info.get("CompanyName"),
        country=info.get("Country"),
        email=(info.get("Email") or {}).get("Address"),
    )


class QuickBooksApi:
    """
    Thin wrapper around the QuickBooks accounting API for one connection.

    The access token is refreshed before a call when it is about to expire,
    and once more if the API still answers 401. Refreshed tokens are written
    onto the connection object and handed to ``on_tokens_refreshed`` so the
    caller can persist them.
    """

    def __init__(
        self,
        connection,
        on_tokens_refreshed: Optional[Callable[[Any, TokenSet], None]] = None,
        max_retries: int = 1,
    ):
        self.connection = connection
        self.on_tokens_refreshed = on_tokens_refreshed
        self.max_retries = max_retries

    @property
    def company_url(self) -> str:
        return f"{get_base_url()}/v3/company/{self.connection.realm_id}"

    def refresh_tokens(self) -> TokenSet:
        tokens = refresh_access_token(self.connection.refresh_token)
        self.connection.access_token = tokens.access_token
        self.connection.refresh_token = tokens.refresh_token
        self.connection.token_expires_at = tokens.expires_at
        if self.on_tokens_refreshed:
            self.on_tokens_refreshed(self.connection, tokens)
        return tokens

    def request(self, method: str, endpoint: str, payload: Optional[dict] = None,
                params: Optional[dict] = None) -> dict:
        if is_token_expired(self.connection.token_expires_at):
            self.refresh_tokens()

        url = f"{self.company_url}{endpoint}"
        retries = 0
        while True:
            try:
                response = requests.request(
                    method,
                    url,
                    json=payload,
                    params=params,
                    headers={
                        "Accept": "application/json",
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {self.connection.access_token}",
                    },
                    timeout=settings.QUICKBOOKS_TIMEOUT_SECONDS,
                )
            except RequestException as e:
                logger.error(f"QuickBooks request {method} {endpoint} failed: {e}")
                raise QuickBooksApiError(f"QuickBooks API error: {e}") from e

            if response.ok:
                return response.json() if response.content else {}

            if response.status_code == 401 and retries < self.max_retries:
                logger.info("Got 401 from QuickBooks, attempting token refresh...")
                self.refresh_tokens()
                retries += 1
                continue

            logger.error(
                f"QuickBooks API error on {method} {endpoint}: {response.status_code}")
            raise QuickBooksApiError(
                f"QuickBooks API error: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

    def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, payload: dict) -> dict:
        return self.request("POST", endpoint, payload=payload)

    def query(self, statement: str) -> dict:
        result = self.get("/query", params={"query": statement})
        return result.get("QueryResponse", {})
