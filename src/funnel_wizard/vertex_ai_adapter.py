from __future__ import annotations

import json
import logging
from typing import Any

import vertexai
from vertexai.generative_models import GenerationConfig, GenerativeModel

logger = logging.getLogger(__name__)


class VertexAIAdapter:
    """Adapter for Vertex AI Gemini text generation."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-1.5-pro",
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name

        vertexai.init(project=project_id, location=location)
        self.model = GenerativeModel(model_name)

    def generate_text(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
        json_mode: bool = False,
    ) -> str:
        """Generate raw text for a prompt.

        Args:
            prompt: Input prompt
            temperature: Sampling temperature (0.0 - 1.0)
            max_output_tokens: Maximum output tokens
            json_mode: Ask the model for an ``application/json`` response

        Returns:
            Generated text
        """
        generation_config = GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json" if json_mode else None,
        )

        response = self.model.generate_content(prompt, generation_config=generation_config)
        generated_text = response.text

        logger.info(
            "Generated text with Vertex AI",
            extra={
                "model": self.model_name,
                "temperature": temperature,
                "input_length": len(prompt),
                "output_length": len(generated_text),
            },
        )

        return generated_text

    def generate_json(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
    ) -> Any:
        """Generate text and parse it as JSON.

        Raises:
            ValueError: The model reply is not valid JSON.
        """
        raw = self.generate_text(
            prompt,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            json_mode=True,
        )
        return parse_json_reply(raw)


def parse_json_reply(raw: str) -> Any:
    """Parse a model reply as JSON, tolerating a surrounding markdown code fence."""
    text = raw.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]

    try:
        return json.loads(text.strip())
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON reply", extra={"reply": raw})
        raise ValueError(f"Invalid JSON response: {exc}") from exc


__all__ = ["VertexAIAdapter", "parse_json_reply"]
