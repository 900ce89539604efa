"""Metadata prompt for Adobe Stock title and keyword generation.

Dependencies: None (pure prompt templates)
System role: Instruction set sent with every image
"""

from stockmeta.models.analysis import TARGET_TAG_COUNT

STOCK_METADATA_PROMPT = f"""Analyze this image for Adobe Stock metadata.

Return ONLY a valid JSON object with this exact structure:
{{
  "title": "A full sentence commercially viable title (max 200 chars)",
  "tags": ["tag1", "tag2", ... exactly {TARGET_TAG_COUNT} tags]
}}

Requirements:
1. Title: Descriptive, commercial, full sentence.
2. Keywords: EXACTLY {TARGET_TAG_COUNT} unique tags. Lowercase.
3. Do not include Markdown formatting like ```json. Just the raw JSON."""


def get_stock_metadata_prompt() -> str:
    """Return the prompt sent alongside each image."""
    return STOCK_METADATA_PROMPT
