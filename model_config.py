"""Model provider selection for the optional cleaning step.

Priority:
  1. ANTHROPIC_API_KEY set: use Anthropic API directly
  2. GOOGLE_CLOUD_PROJECT set: use Claude on Vertex AI
  3. Neither: no model, callers skip LLM work

Usage:
    from model_config import get_llm_model
    model = get_llm_model()
"""
import os
from typing import Optional

# Model identifiers (litellm routing strings)
ANTHROPIC_MODEL = "anthropic/claude-sonnet-4-6"
VERTEX_MODEL = "vertex_ai/claude-sonnet-4-5@20250929"


def get_llm_model() -> Optional[str]:
    """Return the litellm model string for the active provider, or None."""
    provider = active_provider()
    if provider == "anthropic":
        return ANTHROPIC_MODEL
    if provider == "vertex_ai":
        return VERTEX_MODEL
    return None


def active_provider() -> Optional[str]:
    """Return 'anthropic', 'vertex_ai' or None depending on the environment."""
    if os.environ.get("ANTHROPIC_API_KEY"):
        return "anthropic"
    if os.environ.get("GOOGLE_CLOUD_PROJECT"):
        return "vertex_ai"
    return None
