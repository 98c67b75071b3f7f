"""Catalog of selectable models.

This list is the one source for the model dropdown, the relay's default model
and provider routing.
"""

from dataclasses import dataclass

ANTHROPIC = "anthropic"
GOOGLE = "google"


@dataclass(frozen=True)
class ModelInfo:
    """A selectable model."""
    id: str
    name: str
    provider: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


AVAILABLE_MODELS = [
    ModelInfo("claude-sonnet-4-5-20250929", "Claude Sonnet 4.5 (Latest)", ANTHROPIC),
    ModelInfo("claude-opus-4-1-20250805", "Claude Opus 4.1", ANTHROPIC),
    ModelInfo("claude-haiku-4-5-20251001", "Claude Haiku 4.5", ANTHROPIC),
    ModelInfo("claude-3-haiku-20240307", "Claude 3 Haiku (Legacy)", ANTHROPIC),
    ModelInfo("gemini-2.5-flash", "Gemini 2.5 Flash", GOOGLE),
    ModelInfo("gemini-2.5-pro", "Gemini 2.5 Pro", GOOGLE),
]

DEFAULT_MODEL_ID = AVAILABLE_MODELS[0].id


def list_models() -> list[dict]:
    """Return the catalog as `{id, name}` dicts in display order."""
    return [model.to_dict() for model in AVAILABLE_MODELS]


def find_model(model_id: str) -> ModelInfo | None:
    for model in AVAILABLE_MODELS:
        if model.id == model_id:
            return model
    return None


def provider_for(model_id: str) -> str:
    """Return the provider serving `model_id`.

    Ids outside the catalog are still routed so the provider can report on
    them: `gemini-*` goes to Google, everything else to Anthropic.
    """
    model = find_model(model_id)
    if model is not None:
        return model.provider
    if model_id.startswith("gemini-"):
        return GOOGLE
    return ANTHROPIC
