"""Inference gateway factory.

Settings-based provider selection with the stub as default.

Usage:
    from skinwise.infrastructure.ai.factory import create_inference_gateway

    gateway = create_inference_gateway(settings)  # stub or OpenAI
    async with gateway as initialized:
        ...
"""

from typing import Union

from skinwise.config import Settings
from skinwise.infrastructure.ai.openai.client import OpenAIInferenceGateway
from skinwise.infrastructure.ai.stub.stub_gateway import StubInferenceGateway


def create_inference_gateway(
    settings: Settings,
) -> Union[OpenAIInferenceGateway, StubInferenceGateway]:
    """Create inference gateway based on settings.inference_provider.

    Values:
        - "openai": OpenAI structured outputs (requires OPENAI_API_KEY)
        - "stub": Deterministic stub (default)

    Returns:
        Gateway supporting the async context manager protocol

    Example:
        # In .env (production):
        INFERENCE_PROVIDER=openai
        OPENAI_API_KEY=sk-...
    """
    mode = settings.inference_provider

    if mode == "openai":
        if not settings.openai_api_key:
            raise ValueError(
                "INFERENCE_PROVIDER=openai but OPENAI_API_KEY not set. "
                "Set OPENAI_API_KEY in .env or use INFERENCE_PROVIDER=stub"
            )
        return OpenAIInferenceGateway(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
        )

    if mode != "stub":
        raise ValueError(f"Unknown INFERENCE_PROVIDER: {mode!r} (use openai or stub)")

    return StubInferenceGateway()
