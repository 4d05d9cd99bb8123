"""Unit tests for the infrastructure layer: HttpClient, TurnstileVerifier, config store."""

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs

import httpx
import pytest

from config import TURNSTILE_VERIFY_URL
from infrastructure.captcha.turnstile import TurnstileVerifier
from infrastructure.config_store.memory import InMemoryConfigurationStore
from infrastructure.http_client import HttpClient
from schemas.models.guard_config import GuardConfig
from schemas.models.verification import FailureCode, VerificationStatus


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_post_delegates_to_httpx(self, mocker):
        client = HttpClient()
        fake_resp = MagicMock(status_code=200)
        mocker.patch.object(client._client, "post", return_value=fake_resp)
        resp = await client.post("http://example.com")
        assert resp.status_code == 200
        await client.aclose()

    async def test_post_propagates_exception(self, mocker):
        client = HttpClient()
        mocker.patch.object(
            client._client, "post", side_effect=httpx.ConnectError("refused")
        )
        with pytest.raises(httpx.ConnectError, match="refused"):
            await client.post("http://example.com")
        await client.aclose()

    async def test_default_timeout_is_ten_seconds(self):
        async with HttpClient() as client:
            assert client._client.timeout.read == 10.0
            assert client._client.timeout.connect == 10.0

    async def test_context_manager(self):
        async with HttpClient(timeout=2.5) as client:
            assert client._client.timeout.read == 2.5


# ── TurnstileVerifier ─────────────────────────────────────────────────────────


class TestTurnstileVerifier:
    async def test_allows_on_success(self, http, config):
        outcome = await TurnstileVerifier(http).verify("good-token", "1.2.3.4", config)
        assert outcome.allowed
        assert outcome.status is VerificationStatus.ALLOWED
        assert outcome.user_message == ""

    async def test_posts_form_fields_to_siteverify(self, http, config):
        await TurnstileVerifier(http).verify("good-token", "1.2.3.4", config)
        http.post.assert_awaited_once_with(
            TURNSTILE_VERIFY_URL,
            data={"secret": "s", "response": "good-token", "remoteip": "1.2.3.4"},
        )

    async def test_unknown_client_ip_is_sent_empty(self, http, config):
        await TurnstileVerifier(http).verify("good-token", "", config)
        assert http.post.call_args.kwargs["data"]["remoteip"] == ""

    async def test_rejects_when_remote_says_no(self, http, config, reply):
        http.post.return_value = reply(
            body={"success": False, "error-codes": ["invalid-input-response"]}
        )
        outcome = await TurnstileVerifier(http).verify("bad-token", "", config)
        assert outcome.status is VerificationStatus.REJECTED
        assert outcome.code is FailureCode.REMOTE_REJECTED
        assert outcome.error_codes == ("invalid-input-response",)

    async def test_rejects_when_success_absent(self, http, config, reply):
        http.post.return_value = reply(body={"hostname": "example.com"})
        outcome = await TurnstileVerifier(http).verify("token", "", config)
        assert outcome.code is FailureCode.REMOTE_REJECTED

    @pytest.mark.parametrize("success", ["true", 1, "yes"], ids=["str", "int", "word"])
    async def test_only_boolean_true_counts_as_success(self, http, config, reply, success):
        http.post.return_value = reply(body={"success": success})
        outcome = await TurnstileVerifier(http).verify("token", "", config)
        assert not outcome.allowed

    async def test_non_200_is_rejected_even_with_success_body(self, http, config, reply):
        http.post.return_value = reply(
            status_code=500, body={"success": True}, text="Internal Server Error"
        )
        outcome = await TurnstileVerifier(http).verify("token", "", config)
        assert outcome.status is VerificationStatus.REJECTED
        assert outcome.code is FailureCode.MALFORMED_RESPONSE

    async def test_unparseable_body_is_rejected(self, http, config, reply):
        http.post.return_value = reply(body=None, text="<html>oops</html>")
        outcome = await TurnstileVerifier(http).verify("token", "", config)
        assert outcome.code is FailureCode.MALFORMED_RESPONSE

    async def test_non_object_body_is_rejected(self, http, config, reply):
        http.post.return_value = reply(body=[True])
        outcome = await TurnstileVerifier(http).verify("token", "", config)
        assert outcome.code is FailureCode.MALFORMED_RESPONSE

    @pytest.mark.parametrize(
        "exc",
        [httpx.ReadTimeout("timed out"), httpx.ConnectError("refused")],
        ids=["timeout", "connect_error"],
    )
    async def test_transport_failure_fails_closed(self, http, config, exc):
        http.post = AsyncMock(side_effect=exc)
        outcome = await TurnstileVerifier(http).verify("token", "", config)
        assert outcome.status is VerificationStatus.TRANSPORT_ERROR
        assert outcome.code is FailureCode.REMOTE_UNREACHABLE
        assert not outcome.allowed

    @pytest.mark.parametrize("token", ["", "abc"], ids=["empty_token", "token"])
    async def test_missing_secret_is_configuration_error(self, http, token):
        outcome = await TurnstileVerifier(http).verify(token, "", GuardConfig())
        assert outcome.status is VerificationStatus.CONFIGURATION_ERROR
        assert outcome.code is FailureCode.MISSING_SECRET
        http.post.assert_not_called()

    async def test_empty_token_never_reaches_network(self, http, config):
        outcome = await TurnstileVerifier(http).verify("", "1.2.3.4", config)
        assert outcome.status is VerificationStatus.REJECTED
        assert outcome.code is FailureCode.MISSING_TOKEN
        http.post.assert_not_called()

    async def test_exactly_one_call_per_verification(self, http, config, reply):
        http.post.return_value = reply(body={"success": False})
        await TurnstileVerifier(http).verify("token", "", config)
        assert http.post.await_count == 1

    async def test_none_config_is_misuse(self, http):
        with pytest.raises(TypeError):
            await TurnstileVerifier(http).verify("token", "", None)

    async def test_same_reply_same_outcome(self, http, config, reply):
        http.post.return_value = reply(body={"success": False, "error-codes": ["x"]})
        verifier = TurnstileVerifier(http)
        first = await verifier.verify("token", "1.1.1.1", config)
        second = await verifier.verify("token", "1.1.1.1", config)
        assert first == second

    async def test_end_to_end_with_mock_transport(self, config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"success": True})

        client = HttpClient()
        await client._client.aclose()
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with client:
            outcome = await TurnstileVerifier(client).verify("tok", "9.9.9.9", config)

        assert outcome.allowed
        assert seen["url"] == TURNSTILE_VERIFY_URL
        assert seen["form"] == {
            "secret": ["s"],
            "response": ["tok"],
            "remoteip": ["9.9.9.9"],
        }


# ── InMemoryConfigurationStore ────────────────────────────────────────────────


class TestInMemoryConfigurationStore:
    def test_defaults_match_fresh_install(self):
        config = InMemoryConfigurationStore().get()
        assert config.site_key == ""
        assert config.secret_key == ""
        assert config.enable_login and config.enable_register and config.enable_comment

    def test_set_replaces_snapshot(self):
        store = InMemoryConfigurationStore()
        before = store.get()
        store.set(GuardConfig(secret_key="new", enable_comment=False))
        assert store.get().secret_key == "new"
        assert before.secret_key == ""

    def test_set_from_form_input_sanitizes(self):
        store = InMemoryConfigurationStore()
        config = store.set(
            {"site_key": "  0x4AAA  ", "secret_key": " sec\n", "enable_login": "on"}
        )
        assert config.site_key == "0x4AAA"
        assert config.secret_key == "sec"
        assert config.enable_login is True
        # unchecked boxes are simply missing from the form
        assert config.enable_register is False
        assert config.enable_comment is False

    def test_snapshot_is_immutable(self):
        config = InMemoryConfigurationStore().get()
        with pytest.raises(Exception):
            config.secret_key = "changed"

    def test_set_accepts_any_checkbox_value(self):
        store = InMemoryConfigurationStore()
        config = store.set({"enable_login": "checked", "enable_register": "0"})
        assert config.enable_login is True
        assert config.enable_register is False
