"""Unit tests for the Gemini-backed text model."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from daily_insights.services.llm import LLMService, open_text_model


class TestLLMService(unittest.IsolatedAsyncioTestCase):
    def test_no_api_key(self):
        service = LLMService(None)
        self.assertFalse(service.available)
        self.assertIsNone(open_text_model(""))

    def test_client_init_failure(self):
        with patch("daily_insights.services.llm.genai.Client", side_effect=ValueError("bad key")):
            self.assertFalse(LLMService("fake_key").available)

    async def test_run_maps_messages_and_budget(self):
        with patch("daily_insights.services.llm.genai.Client") as mock_client:
            generate = AsyncMock(return_value=MagicMock(text="<h2>Hi</h2>"))
            mock_client.return_value.aio.models.generate_content = generate

            service = LLMService("fake_key")
            result = await service.run(
                "gemini-2.0-flash",
                {
                    "messages": [
                        {"role": "system", "content": "Be clear."},
                        {"role": "user", "content": "Write."},
                    ],
                    "max_tokens": 1800,
                },
            )

        self.assertEqual(result, {"response": "<h2>Hi</h2>"})
        kwargs = generate.call_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-2.0-flash")
        self.assertEqual(
            kwargs["contents"], [{"role": "user", "parts": [{"text": "Write."}]}]
        )
        self.assertEqual(
            kwargs["config"],
            {"system_instruction": "Be clear.", "max_output_tokens": 1800},
        )

    async def test_run_empty_text(self):
        with patch("daily_insights.services.llm.genai.Client") as mock_client:
            mock_client.return_value.aio.models.generate_content = AsyncMock(
                return_value=MagicMock(text=None)
            )
            result = await LLMService("fake_key").run("m", {"messages": []})
        self.assertEqual(result, {"response": ""})

    async def test_run_without_client(self):
        with self.assertRaises(RuntimeError):
            await LLMService(None).run("m", {"messages": []})


if __name__ == "__main__":
    unittest.main()
