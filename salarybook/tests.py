import base64

from django.test import TestCase, Client, SimpleTestCase, override_settings

from .middleware import is_exempt, parse_basic_auth


def basic(user, password):
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return f"Basic {token}"


class ParseBasicAuthTest(SimpleTestCase):
    def test_valid(self):
        self.assertEqual(parse_basic_auth(basic("admin", "p:ss")), ("admin", "p:ss"))

    def test_invalid(self):
        for header in ("", "Bearer abc", "Basic", "Basic !!!", "Basic " + base64.b64encode(b"nocolon").decode()):
            self.assertIsNone(parse_basic_auth(header), header)

    def test_exempt_paths(self):
        for path in ("/static/app.css", "/api/ping", "/manifest.json", "/sw.js", "/icon-192.png", "/favicon.ico"):
            self.assertTrue(is_exempt(path), path)
        for path in ("/", "/record/", "/settings/", "/analysis/"):
            self.assertFalse(is_exempt(path), path)


@override_settings(BASIC_AUTH_USER="admin", BASIC_AUTH_PASSWORD="secret")
class BasicAuthMiddlewareTest(TestCase):
    def setUp(self):
        self.client = Client()

    def test_no_credentials(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res["WWW-Authenticate"], 'Basic realm="Secure Area"')
        self.assertEqual(res.content, b"Unauthorized")

    def test_wrong_password(self):
        res = self.client.get("/record/", HTTP_AUTHORIZATION=basic("admin", "nope"))
        self.assertEqual(res.status_code, 401)

    def test_wrong_user(self):
        res = self.client.get("/record/", HTTP_AUTHORIZATION=basic("guest", "secret"))
        self.assertEqual(res.status_code, 401)

    def test_valid_credentials(self):
        res = self.client.get("/record/", HTTP_AUTHORIZATION=basic("admin", "secret"))
        self.assertEqual(res.status_code, 200)

    def test_exempt_path_skips_auth(self):
        res = self.client.get("/manifest.json")
        self.assertEqual(res.status_code, 404)

    @override_settings(BASIC_AUTH_USER="")
    def test_gate_disabled_without_user(self):
        res = self.client.get("/record/")
        self.assertEqual(res.status_code, 200)
