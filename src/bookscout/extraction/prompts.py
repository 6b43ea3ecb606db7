# ABOUTME: Prompt templates for the text and cover-photo extraction calls.
# ABOUTME: Both prompts ask for a single JSON object; the recovery engine copes when they don't get one.

TEXT_SCHEMA = (
    '{"query":string,"title":string|null,"author":string|null,"confidence":number,'
    '"translated_query":string|null,"translated_title":string|null,'
    '"translated_author":string|null,"keywords":string[],"tags":string[],'
    '"variants":string[]}'
)

VISION_SCHEMA = (
    '{"items":[{"title":string,"author":string|null,"confidence":number,'
    '"evidence":string[]}]}'
)


def build_text_prompt(user_text: str) -> str:
    """Prompt that turns a free-text book description into search data."""
    return (
        "You extract book search data from a user's description.\n\n"
        "Return ONLY valid minified JSON.\n"
        "No markdown. No explanations. No text before or after JSON.\n\n"
        f"Schema: {TEXT_SCHEMA}\n\n"
        "Field rules:\n"
        "- query: 2-6 words useful for searching the book, key nouns only, "
        "no filler words like book/story/novel.\n"
        "- title: exact title ONLY if you are very sure, otherwise null.\n"
        "- author: exact author ONLY if you are very sure, otherwise null.\n"
        "- translated_*: the same fields in Russian if the book is known under "
        "a Russian title, otherwise null.\n"
        "- variants: other titles the book is published under.\n"
        "- confidence: 0.9-1.0 famous and clearly identified, 0.6-0.8 strong guess, "
        "0.3-0.5 weak guess, 0.0-0.2 almost no idea.\n\n"
        "Important behavior:\n"
        "- NEVER return empty JSON.\n"
        "- NEVER omit fields.\n"
        "- NEVER invent a fake title or author.\n"
        "- If unsure, still produce the best possible query.\n\n"
        "User description:\n"
        "```text\n"
        f"{user_text}\n"
        "```"
    )


VISION_PROMPT = (
    "You are a book identifier.\n"
    "Extract book title and author from the image.\n"
    f"Return ONLY JSON:\n{VISION_SCHEMA}\n\n"
    "Rules:\n"
    "- Do not invent.\n"
    "- Evidence must be exact text you can read on the image (title/author fragments).\n"
    "- Ignore UI elements like likes, comments, usernames, time, follow."
)
