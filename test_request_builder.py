import unittest

from chatbridge.config.settings import PluginConfiguration
from chatbridge.llm.request import build_request


def make_config(**overrides) -> PluginConfiguration:
    cfg = {"api_key": "sk-test"}
    cfg.update(overrides)
    return PluginConfiguration.from_mapping(cfg)


class TestBuildRequest(unittest.TestCase):
    def test_last_message_is_raw_user_text(self):
        for variant in ("openai", "openrouter"):
            config = make_config(variant=variant)
            for text in ("hi there", "  padded  ", "", "line one\nline two"):
                request = build_request(config, text)
                self.assertEqual(request.messages[-1], {"role": "user", "content": text})

    def test_idempotent(self):
        config = make_config(variant="openrouter", stop=["###"])
        self.assertEqual(build_request(config, "hello"), build_request(config, "hello"))

    def test_openai_variant_sends_only_user_message(self):
        request = build_request(make_config(), "hello")
        self.assertEqual(len(request.messages), 1)

    def test_openrouter_variant_prepends_system_prompt(self):
        request = build_request(make_config(variant="openrouter"), "hello")
        self.assertEqual(request.messages[0]["role"], "system")
        self.assertIn("poet", request.messages[0]["content"])
        self.assertEqual(request.messages[1]["role"], "user")

    def test_empty_system_prompt_disables_preset(self):
        request = build_request(make_config(variant="openrouter", system_prompt=""), "hello")
        self.assertEqual([m["role"] for m in request.messages], ["user"])

    def test_sampling_parameters_copied(self):
        config = make_config(
            model="google/gemini-pro",
            temperature=0.3,
            max_tokens=256,
            top_p=0.9,
            frequency_penalty=0.5,
            presence_penalty=-0.5,
        )
        payload = build_request(config, "hello").to_payload()
        self.assertEqual(payload["model"], "google/gemini-pro")
        self.assertEqual(payload["temperature"], 0.3)
        self.assertEqual(payload["max_tokens"], 256)
        self.assertEqual(payload["top_p"], 0.9)
        self.assertEqual(payload["frequency_penalty"], 0.5)
        self.assertEqual(payload["presence_penalty"], -0.5)

    def test_stop_omitted_when_unset_or_empty(self):
        for stop in (None, []):
            request = build_request(make_config(stop=stop), "hello")
            self.assertIsNone(request.stop)
            self.assertNotIn("stop", request.to_payload())

    def test_stop_sequences_forwarded(self):
        payload = build_request(make_config(stop=["###", "END"]), "hello").to_payload()
        self.assertEqual(payload["stop"], ["###", "END"])


if __name__ == "__main__":
    unittest.main()
