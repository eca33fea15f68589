"""
Blog Writer - Prompt the text generator and extract articles.

The writer is responsible for:
1. Building the prompt for each job (transcript, free text, translation)
2. Calling the text-generation adapter
3. Running the output through the structured-output pipeline

There is no automatic re-prompting: a provider failure or unrecoverable
output propagates to the caller.
"""

import logging

from blogsmith.core.extractor import (
    ARTICLE_SHAPE,
    ENGLISH_ARTICLE_SHAPE,
    ExpectedShape,
    StructuredRecord,
    parse_model_output,
)
from blogsmith.providers.base import CompletionRequest, ProviderAdapter

logger = logging.getLogger(__name__)


class BlogWriter:
    """Generate and translate blog articles with a text generator."""

    TRANSCRIPT_PROMPT = """Task: Convert the following transcript into a blog article.

Transcript: "{transcript}"

Instructions:
1. Write a blog article based on this transcript.
2. Provide a separate title.
3. Adapt the tone to the content.
4. Keep the key message.
5. Write in English only.

Respond ONLY with a valid JSON object in exactly this format:
{{"english": {{"title": "Title in English", "content": "Content in English"}}}}

Do not include any other text, explanations, or markdown formatting."""

    TEXT_PROMPT = """Task: Convert the following text into a blog article.

Text: "{text}"

Do not use HTML tags or any other markup.
Respond ONLY with a valid JSON object in exactly this format:
{{"title": "Generated Title Here", "content": "Generated Content Here"}}

Do not include any other text, explanations, or markdown formatting."""

    TRANSLATE_PROMPT = """Translate this blog from English to {language}.

Title: {title}
Content: {content}

Respond ONLY with a JSON object in this exact format:
{{"title":"translated title","content":"translated content"}}

Your entire response must be the JSON object, nothing else."""

    def __init__(self, generator: ProviderAdapter):
        self.generator = generator

    async def generate_from_transcript(self, transcript: str) -> StructuredRecord:
        """
        Write an English article from a video transcript.

        Returns:
            Record with "english.title" and "english.content"
        """
        self._require(transcript=transcript)
        prompt = self.TRANSCRIPT_PROMPT.format(transcript=transcript)
        return await self._generate(prompt, ENGLISH_ARTICLE_SHAPE)

    async def generate_from_text(self, text: str) -> StructuredRecord:
        """
        Write an article from free text.

        Returns:
            Record with "title" and "content"
        """
        self._require(text=text)
        prompt = self.TEXT_PROMPT.format(text=text)
        return await self._generate(prompt, ARTICLE_SHAPE)

    async def translate(self, title: str, content: str, language: str) -> StructuredRecord:
        """
        Translate an article into language.

        Returns:
            Record with the translated "title" and "content"
        """
        self._require(title=title, content=content, language=language)
        prompt = self.TRANSLATE_PROMPT.format(
            language=language.strip(),
            title=title.replace('"', '\\"'),
            content=content.replace('"', '\\"'),
        )
        return await self._generate(prompt, ARTICLE_SHAPE)

    async def _generate(self, prompt: str, shape: ExpectedShape) -> StructuredRecord:
        response = await self.generator.complete(CompletionRequest(prompt=prompt))
        logger.debug(f"Raw model response: {response.content!r}")
        return parse_model_output(response.content, shape)

    @staticmethod
    def _require(**fields: str | None) -> None:
        missing = [name for name, value in fields.items() if not value or not value.strip()]
        if missing:
            raise ValueError(f"Missing required input: {', '.join(missing)}")
