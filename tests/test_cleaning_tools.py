"""Unit tests for cleaning_tools — LLM title/company cleanup."""
from unittest.mock import MagicMock, patch


CLEANING_MODULE = "tools.cleaning_tools"


def _completion(content):
    resp = MagicMock()
    resp.choices = [MagicMock()]
    resp.choices[0].message.content = content
    return resp


class TestCleanContactData:
    @patch(f"{CLEANING_MODULE}.litellm.completion")
    @patch(f"{CLEANING_MODULE}.get_llm_model", return_value="anthropic/test-model")
    def test_parses_fenced_json(self, mock_model, mock_completion):
        mock_completion.return_value = _completion(
            '```json\n{"jobTitle": "Software Engineer", "company": null}\n```'
        )

        from tools.cleaning_tools import clean_contact_data
        result = clean_contact_data("SWE @ Acme | ex-Foo", "Acme · Full-time")

        assert result == {"job_title": "Software Engineer", "company": None}
        assert mock_completion.call_args.kwargs["model"] == "anthropic/test-model"

    @patch(f"{CLEANING_MODULE}.litellm.completion")
    @patch(f"{CLEANING_MODULE}.get_llm_model", return_value="anthropic/test-model")
    def test_falls_back_to_raw_on_failure(self, mock_model, mock_completion):
        mock_completion.side_effect = RuntimeError("rate limited")

        from tools.cleaning_tools import clean_contact_data
        result = clean_contact_data("CTO", "Acme")

        assert result == {"job_title": "CTO", "company": "Acme"}

    @patch(f"{CLEANING_MODULE}.litellm.completion")
    @patch(f"{CLEANING_MODULE}.get_llm_model", return_value=None)
    def test_skips_without_provider(self, mock_model, mock_completion):
        from tools.cleaning_tools import clean_contact_data
        result = clean_contact_data("CTO", None)

        assert result == {"job_title": "CTO", "company": None}
        mock_completion.assert_not_called()
