"""アプリ全体を HTTP Basic 認証で保護するミドルウェア.

settings.BASIC_AUTH_USER が空のときは何もしない（ローカル開発用）。
静的ファイル・/api/・PWA 用のファイル・画像は認証なしで通す。
"""

import base64
import binascii
import logging
import re

from django.conf import settings
from django.http import HttpResponse
from django.utils.crypto import constant_time_compare

logger = logging.getLogger(__name__)

EXEMPT_PREFIXES = ("/static/", "/api/")
EXEMPT_PATHS = ("/manifest.json", "/sw.js")
EXEMPT_ASSET = re.compile(r"\.(ico|png|jpg|svg)$")


def is_exempt(path):
    return (
        path.startswith(EXEMPT_PREFIXES)
        or path in EXEMPT_PATHS
        or EXEMPT_ASSET.search(path) is not None
    )


def parse_basic_auth(header):
    """'Basic xxx' ヘッダーから (user, password) を取り出す。不正なら None."""
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


class BasicAuthMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        expected_user = settings.BASIC_AUTH_USER
        if not expected_user or is_exempt(request.path):
            return self.get_response(request)

        credentials = parse_basic_auth(request.headers.get("Authorization", ""))
        if credentials is not None:
            user, password = credentials
            if constant_time_compare(user, expected_user) and constant_time_compare(
                password, settings.BASIC_AUTH_PASSWORD
            ):
                return self.get_response(request)

        logger.warning("basic auth rejected path=%s", request.path)
        response = HttpResponse("Unauthorized", status=401)
        response["WWW-Authenticate"] = 'Basic realm="Secure Area"'
        return response
