"""
Topic categorization for exported conversations.
"""

import json
import os

from google import genai

from claude_formatter import extract_text_content

MODEL_NAME = os.getenv("GEMINI_MODEL", "gemini-3-pro-preview")

DEFAULT_CATEGORY = "coding"

# Order matters: ties go to the category listed first.
KEYWORDS = {
    'ai-general': ['ai', 'llm', 'model', 'neural', 'transformer', 'gpt', 'claude', 'machine learning', 'ml', 'nlp',
                   'research', 'paper', 'architecture', 'training', 'language', 'embedding', 'vector', 'prompt',
                   'generation'],
    'coding': ['code', 'function', 'bug', 'fix', 'react', 'javascript', 'typescript', 'python', 'api', 'database',
               'git', 'development', 'feature', 'refactor', 'test', 'component', 'framework', 'library', 'node',
               'express', 'sql', 'query', 'deploy', 'docker', 'ci/cd'],
    'investing': ['invest', 'portfolio', 'stock', 'crypto', 'fund', 'market', 'financial', 'trading', 'price',
                  'earnings', 'dividend', 'bond', 'etf', 'bitcoin', 'ethereum', 'analysis', 'return', 'yield',
                  'strategy'],
}

CATEGORIES = list(KEYWORDS)


def configure_gemini(api_key):
    """Configure Gemini API."""
    return genai.Client(api_key=api_key)


def score_categories(conversation):
    """Count how many keywords of each category occur in the conversation."""
    text = f"{conversation.get('name') or ''} {extract_text_content(conversation)}".lower()
    return {
        category: sum(1 for word in words if word in text)
        for category, words in KEYWORDS.items()
    }


def categorize_by_keywords(conversation):
    """Pick the highest scoring category, 'coding' when nothing matches."""
    scores = score_categories(conversation)
    best = max(CATEGORIES, key=lambda category: scores[category])
    return best if scores[best] > 0 else DEFAULT_CATEGORY


def _strip_code_fence(response_text):
    if response_text.startswith('```json'):
        response_text = response_text[7:]
    if response_text.startswith('```'):
        response_text = response_text[3:]
    if response_text.endswith('```'):
        response_text = response_text[:-3]
    return response_text.strip()


def categorize_with_gemini(client, conversation):
    """
    Ask Gemini which category a conversation belongs to.
    Falls back to keyword scoring when the call fails or the answer is not a
    known category.
    """
    categories_text = ", ".join(CATEGORIES)
    prompt = f"""Classify the following conversation between a user and an AI assistant into exactly one category.

Categories: {categories_text}

Title: {conversation.get('name') or 'Untitled'}

{extract_text_content(conversation, limit=2000)}

Return your response as JSON with this exact format:
{{
    "category": "one of: {categories_text}"
}}
"""

    try:
        response = client.models.generate_content(model=MODEL_NAME, contents=prompt)
        result = json.loads(_strip_code_fence(response.text.strip()))
        category = result.get('category') if isinstance(result, dict) else None
    except Exception as e:
        print(f"Error categorizing conversation: {e}")
        category = None

    if category in CATEGORIES:
        return category
    return categorize_by_keywords(conversation)
