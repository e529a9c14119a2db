from __future__ import annotations

from srtsuite.options import Language, TranslationStyle


def build_translation_prompt(text: str, language: Language, style: TranslationStyle) -> str:
    return (
        f"Translate the following text into {language.value}.\n"
        f"The translation style should be: {style.value}.\n"
        'Do not add any introductory phrases like "Here is the translation:".\n'
        "Only return the translated text.\n"
        "\n"
        "Text to translate:\n"
        "---\n"
        f"{text}\n"
        "---\n"
    )
