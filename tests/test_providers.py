import asyncio
import dataclasses
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.config import ProviderConfigError, load_ai_config
from app.ai.errors import INVALID_CREDENTIAL_MESSAGE, classify_provider_error
from app.ai.factory import build_ai_client
from app.ai.providers.gemini_provider import GeminiProvider
from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.types import ProviderError, ProviderErrorKind
from app.core.config import settings


def _settings(**overrides):
    return dataclasses.replace(settings, **overrides)


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class LoadAIConfigTests(unittest.TestCase):
    def test_openai_is_selected_with_direct_model(self):
        cfg = load_ai_config(_settings(ai_provider="openai", openai_api_key="sk-test"))
        self.assertEqual(cfg.provider, "openai")
        self.assertEqual(cfg.model, settings.openai_model)
        self.assertIsNone(cfg.base_url)

    def test_openrouter_uses_gateway_url_and_headers(self):
        cfg = load_ai_config(
            _settings(ai_provider="openrouter", openrouter_api_key="or-test", frontend_url="https://app.example")
        )
        self.assertEqual(cfg.base_url, settings.openrouter_base_url)
        self.assertEqual(cfg.model, settings.openrouter_model)
        self.assertEqual(cfg.default_headers["HTTP-Referer"], "https://app.example")
        self.assertIn("X-Title", cfg.default_headers)

    def test_missing_credential_is_fatal(self):
        for provider, field in (
            ("openai", "openai_api_key"),
            ("openrouter", "openrouter_api_key"),
            ("gemini", "gemini_api_key"),
        ):
            with self.subTest(provider=provider):
                with self.assertRaises(ProviderConfigError):
                    load_ai_config(_settings(ai_provider=provider, **{field: "  "}))

    def test_request_timeout_comes_from_settings(self):
        for provider, field in (("openai", "openai_api_key"), ("openrouter", "openrouter_api_key")):
            with self.subTest(provider=provider):
                cfg = load_ai_config(_settings(ai_provider=provider, openai_timeout_s=12.5, **{field: "k"}))
                self.assertEqual(cfg.timeout_s, 12.5)

    def test_unknown_provider_is_fatal(self):
        with self.assertRaises(ProviderConfigError):
            load_ai_config(_settings(ai_provider="claude"))

    def test_api_key_is_not_in_repr(self):
        cfg = load_ai_config(_settings(ai_provider="openai", openai_api_key="sk-secret"))
        self.assertNotIn("sk-secret", repr(cfg))


class OpenAIProviderTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("app.ai.providers.openai_provider.AsyncOpenAI")
        self.sdk_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.create = AsyncMock(return_value=_completion('{"overallScore": 90}'))
        self.sdk_cls.return_value.chat.completions.create = self.create

    def test_sends_system_and_user_messages_with_fixed_sampling(self):
        provider = OpenAIProvider(model="gpt-4o", api_key="sk-test")

        text = asyncio.run(provider.complete("SYSTEM", "USER"))

        self.assertEqual(text, '{"overallScore": 90}')
        kwargs = self.create.await_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-4o")
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertEqual(kwargs["max_tokens"], 2000)
        self.assertEqual(
            kwargs["messages"],
            [{"role": "system", "content": "SYSTEM"}, {"role": "user", "content": "USER"}],
        )

    def test_sdk_retries_are_disabled(self):
        OpenAIProvider(model="gpt-4o", api_key="sk-test")
        self.assertEqual(self.sdk_cls.call_args.kwargs["max_retries"], 0)

    def test_empty_choices_return_empty_text(self):
        self.create.return_value = SimpleNamespace(choices=[])
        provider = OpenAIProvider(model="gpt-4o", api_key="sk-test")
        self.assertEqual(asyncio.run(provider.complete("s", "u")), "")

    def test_api_key_message_is_reclassified(self):
        self.create.side_effect = RuntimeError("Incorrect API key provided: sk-test")
        provider = OpenAIProvider(model="gpt-4o", api_key="sk-test")

        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(provider.complete("s", "u"))

        self.assertIs(ctx.exception.kind, ProviderErrorKind.INVALID_CREDENTIAL)
        self.assertEqual(str(ctx.exception), INVALID_CREDENTIAL_MESSAGE)

    def test_other_errors_are_upstream(self):
        self.create.side_effect = RuntimeError("model overloaded")
        provider = OpenAIProvider(model="gpt-4o", api_key="sk-test")

        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(provider.complete("s", "u"))

        self.assertIs(ctx.exception.kind, ProviderErrorKind.UPSTREAM)
        self.assertEqual(str(ctx.exception), "model overloaded")


class GeminiProviderTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("app.ai.providers.gemini_provider.genai")
        self.genai = patcher.start()
        self.addCleanup(patcher.stop)
        self.generate = AsyncMock(return_value=SimpleNamespace(text='{"matchPercentage": 64}'))
        self.genai.GenerativeModel.return_value.generate_content_async = self.generate

    def test_concatenates_instruction_and_prompt(self):
        provider = GeminiProvider(model="gemini-2.5-flash", api_key="g-key")

        text = asyncio.run(provider.complete("SYSTEM", "USER"))

        self.assertEqual(text, '{"matchPercentage": 64}')
        self.genai.configure.assert_called_once_with(api_key="g-key")
        self.genai.GenerativeModel.assert_called_once_with("gemini-2.5-flash")
        self.generate.assert_awaited_once_with("SYSTEM\n\nUSER")

    def test_key_errors_are_reclassified(self):
        self.generate.side_effect = ValueError("API key not valid. Please pass a valid API key.")
        provider = GeminiProvider(model="gemini-2.5-flash", api_key="g-key")

        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(provider.complete("s", "u"))

        self.assertIs(ctx.exception.kind, ProviderErrorKind.INVALID_CREDENTIAL)


class ProviderSelectionTests(unittest.TestCase):
    @patch("app.ai.providers.gemini_provider.genai")
    @patch("app.ai.providers.openai_provider.AsyncOpenAI")
    def test_each_configuration_routes_to_its_own_adapter(self, openai_cls, genai):
        openai_create = AsyncMock(return_value=_completion("from-openai"))
        openai_cls.return_value.chat.completions.create = openai_create
        gemini_generate = AsyncMock(return_value=SimpleNamespace(text="from-gemini"))
        genai.GenerativeModel.return_value.generate_content_async = gemini_generate

        openai_client = build_ai_client(load_ai_config(_settings(ai_provider="openai", openai_api_key="sk")))
        gemini_client = build_ai_client(load_ai_config(_settings(ai_provider="gemini", gemini_api_key="g")))

        self.assertIsInstance(openai_client, OpenAIProvider)
        self.assertIsInstance(gemini_client, GeminiProvider)
        self.assertEqual(asyncio.run(gemini_client.complete("s", "u")), "from-gemini")
        self.assertEqual(asyncio.run(openai_client.complete("s", "u")), "from-openai")
        self.assertEqual(openai_create.await_count, 1)
        self.assertEqual(gemini_generate.await_count, 1)

    @patch("app.ai.providers.openai_provider.AsyncOpenAI")
    def test_openrouter_client_uses_gateway(self, openai_cls):
        cfg = load_ai_config(_settings(ai_provider="openrouter", openrouter_api_key="or"))
        client = build_ai_client(cfg)

        self.assertEqual(client.provider, "openrouter")
        self.assertEqual(client.model, settings.openrouter_model)
        self.assertEqual(openai_cls.call_args.kwargs["base_url"], settings.openrouter_base_url)
        self.assertIn("HTTP-Referer", openai_cls.call_args.kwargs["default_headers"])

    @patch("app.ai.providers.openai_provider.AsyncOpenAI")
    def test_configured_timeout_reaches_the_sdk(self, openai_cls):
        cfg = load_ai_config(_settings(ai_provider="openai", openai_api_key="sk", openai_timeout_s=12.5))
        build_ai_client(cfg)

        self.assertEqual(openai_cls.call_args.kwargs["timeout"], 12.5)

    @patch("app.ai.providers.gemini_provider.genai")
    def test_gemini_key_is_configured_process_wide(self, genai):
        GeminiProvider(model="gemini-2.5-flash", api_key="first")
        GeminiProvider(model="gemini-2.5-flash", api_key="second")

        self.assertEqual(
            [c.kwargs["api_key"] for c in genai.configure.call_args_list],
            ["first", "second"],
        )


class ClassifyProviderErrorTests(unittest.TestCase):
    def test_status_401_is_a_credential_error(self):
        exc = RuntimeError("unauthorized")
        exc.status_code = 401
        self.assertIs(classify_provider_error(exc).kind, ProviderErrorKind.INVALID_CREDENTIAL)

    def test_provider_errors_pass_through(self):
        original = ProviderError(ProviderErrorKind.UPSTREAM, "boom")
        self.assertIs(classify_provider_error(original), original)

    def test_blank_message_falls_back_to_class_name(self):
        self.assertEqual(str(classify_provider_error(TimeoutError())), "TimeoutError")


if __name__ == "__main__":
    unittest.main()
