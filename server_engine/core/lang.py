# server_engine/core/lang.py

from typing import Dict


class LangManager:
    """
    Localized message templates registered by plugins.
    Falls back to English, then to the key itself.
    """

    DEFAULT_LANGUAGE = "en"

    def __init__(self):
        # plugin name -> language -> key -> template
        self._messages: Dict[str, Dict[str, Dict[str, str]]] = {}
        self._user_languages: Dict[str, str] = {}

    def register_messages(self, messages: Dict[str, str], plugin, lang: str = DEFAULT_LANGUAGE):
        by_lang = self._messages.setdefault(plugin.name, {})
        existing = by_lang.setdefault(lang, {})
        # Keep keys a server owner already translated
        for key, template in messages.items():
            existing.setdefault(key, template)

    def set_language(self, user_id: str, lang: str):
        self._user_languages[user_id] = lang

    def get_language(self, user_id: str = None) -> str:
        return self._user_languages.get(user_id, self.DEFAULT_LANGUAGE)

    def get_message(self, key: str, plugin, user_id: str = None) -> str:
        by_lang = self._messages.get(plugin.name, {})
        lang = self.get_language(user_id)
        for candidate in (lang, self.DEFAULT_LANGUAGE):
            template = by_lang.get(candidate, {}).get(key)
            if template is not None:
                return template
        return key
