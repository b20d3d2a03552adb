"""
Supported translation languages

The translation backend only accepts the target codes listed here, so the
catalogue is a closed enumeration rather than a free-form string.
"""

from enum import Enum
from typing import List


class Language(Enum):
    """Translation target language: (code, display name, flag)"""

    SPANISH = ("es", "Spanish", "🇪🇸")
    FRENCH = ("fr", "French", "🇫🇷")
    GERMAN = ("de", "German", "🇩🇪")
    ITALIAN = ("it", "Italian", "🇮🇹")
    PORTUGUESE = ("pt", "Portuguese", "🇵🇹")
    RUSSIAN = ("ru", "Russian", "🇷🇺")
    JAPANESE = ("ja", "Japanese", "🇯🇵")
    KOREAN = ("ko", "Korean", "🇰🇷")
    CHINESE = ("zh", "Chinese", "🇨🇳")
    ARABIC = ("ar", "Arabic", "🇸🇦")
    HINDI = ("hi", "Hindi", "🇮🇳")
    TURKISH = ("tr", "Turkish", "🇹🇷")
    DUTCH = ("nl", "Dutch", "🇳🇱")
    SWEDISH = ("sv", "Swedish", "🇸🇪")
    NORWEGIAN = ("no", "Norwegian", "🇳🇴")
    FINNISH = ("fi", "Finnish", "🇫🇮")
    DANISH = ("da", "Danish", "🇩🇰")
    POLISH = ("pl", "Polish", "🇵🇱")
    UKRAINIAN = ("uk", "Ukrainian", "🇺🇦")
    GREEK = ("el", "Greek", "🇬🇷")
    HEBREW = ("he", "Hebrew", "🇮🇱")
    INDONESIAN = ("id", "Indonesian", "🇮🇩")
    THAI = ("th", "Thai", "🇹🇭")
    VIETNAMESE = ("vi", "Vietnamese", "🇻🇳")

    def __init__(self, code: str, display_name: str, flag: str):
        self.code = code
        self.display_name = display_name
        self.flag = flag

    @property
    def label(self) -> str:
        """Label shown in language pickers, e.g. '🇫🇷 French'"""
        return f"{self.flag} {self.display_name}"

    @classmethod
    def from_code(cls, code: str) -> "Language":
        """Look up a catalogue entry by its language code"""
        normalized = (code or "").strip().lower()
        for language in cls:
            if language.code == normalized:
                return language
        raise ValueError(f"Unsupported language code: {code!r}")

    @classmethod
    def codes(cls) -> List[str]:
        return [language.code for language in cls]


DEFAULT_LANGUAGE = Language.SPANISH
