"""Cyrillic (Russian and Uzbek) to Latin transliteration."""

CYRILLIC_TO_LATIN = {
    "А": "A", "а": "a",
    "Б": "B", "б": "b",
    "В": "V", "в": "v",
    "Г": "G", "г": "g",
    "Д": "D", "д": "d",
    "Е": "E", "е": "e",
    "Ё": "E", "ё": "e",
    "Ж": "J", "ж": "j",
    "З": "Z", "з": "z",
    "И": "I", "и": "i",
    "Й": "Y", "й": "y",
    "К": "K", "к": "k",
    "Л": "L", "л": "l",
    "М": "M", "м": "m",
    "Н": "N", "н": "n",
    "О": "O", "о": "o",
    "П": "P", "п": "p",
    "Р": "R", "р": "r",
    "С": "S", "с": "s",
    "Т": "T", "т": "t",
    "У": "U", "у": "u",
    "Ф": "F", "ф": "f",
    "Х": "H", "х": "h",
    "Ц": "TS", "ц": "ts",
    "Ч": "CH", "ч": "ch",
    "Ш": "SH", "ш": "sh",
    "Щ": "SCH", "щ": "sch",
    "Ъ": "", "ъ": "",
    "Ы": "Y", "ы": "y",
    "Ь": "", "ь": "",
    "Э": "E", "э": "e",
    "Ю": "YU", "ю": "yu",
    "Я": "YA", "я": "ya",
    # Uzbek
    "Ў": "O", "ў": "o",
    "Қ": "Q", "қ": "q",
    "Ғ": "G", "ғ": "g",
    "Ҳ": "H", "ҳ": "h",
}

_TABLE = str.maketrans(CYRILLIC_TO_LATIN)


def transliterate(text: str) -> str:
    """Map Cyrillic letters to Latin; anything else is returned unchanged."""
    return text.translate(_TABLE)


def has_cyrillic(text: str) -> bool:
    return any(char in CYRILLIC_TO_LATIN for char in text)
