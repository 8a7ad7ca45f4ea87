"""
Provides the `KeywordMapper` class, the lexer's keyword classification table.

The lexer scans a whole identifier first and only then asks the mapper whether
the word is reserved. New keywords, or alternative spellings of existing ones,
are added by configuring the mapper; the scan loop never changes.

Classes:
    - KeywordMapper: Maps words to canonical keyword token types.
    - MappingError: Raised when a configuration is invalid or conflicts.

Usage:
    >>> mapper = KeywordMapper.from_canonical()
    >>> mapper.configure({("func", "function"): "FN"})
    >>> mapper.classify("function")
    'FN'
"""

import json
from typing import Any

from sprout.sprout_constants import KEYWORD_TOKENS, boolean_literals, keyword_hashmap


class MappingError(Exception):
    """Raised when a keyword configuration is invalid or contains conflicts.

    Attributes:
        conflicts (list[str]): One description per conflicting alias.

    Example:
        raise MappingError("Alias conflict", ["'func' → FN vs LET"])
    """

    def __init__(self, message: str, conflicts: list[str] | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


class KeywordMapper:
    """Word-to-keyword lookup table used by the Sprout lexer.

    Attributes:
        token_map (dict[str, str]): Maps reserved words to canonical token types.
    """

    def __init__(self) -> None:
        self.token_map: dict[str, str] = {}

    def classify(self, word: str) -> str | None:
        """Returns the keyword token type for `word`, or None if it is not reserved."""
        return self.token_map.get(word)

    def __contains__(self, word: object) -> bool:
        return word in self.token_map

    def report(self) -> str:
        """Formats the current mappings, one `word → TYPE` line each, sorted by word."""
        return "\n".join(
            f"{alias:>12} → {sym}" for alias, sym in sorted(self.token_map.items())
        )

    def summary(self) -> dict[str, str]:
        return dict(self.token_map)

    def _extract_aliases(self, entry: Any) -> list[str]:
        """Flattens a configuration key (str, or nested list/tuple/set) into words."""
        if entry is None:
            return []
        if isinstance(entry, str):
            return [entry]
        if isinstance(entry, (list, tuple, set, frozenset)):
            aliases: list[str] = []
            for item in entry:
                aliases.extend(self._extract_aliases(item))
            return aliases
        raise MappingError(f"Unsupported alias entry: {entry!r}")

    @classmethod
    def from_canonical(cls) -> "KeywordMapper":
        """Constructs a mapper preloaded with the language's reserved words."""
        instance = cls()
        instance.configure(keyword_hashmap)
        return instance

    def load_from_json(self, path: str) -> None:
        """
        Loads keyword aliases from a JSON file and applies them via `configure`.

        Each key is a comma-separated list of words and each value a keyword
        token type:

            {
                "func,function": "FN",
                "var": "LET"
            }

        Raises:
            MappingError: If the file cannot be read or the configuration is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, ValueError) as e:
            raise MappingError(f"Failed to load keyword file: {e}") from e

        if not isinstance(raw_cfg, dict):
            raise MappingError("Keyword file must contain a JSON object")

        parsed_cfg: dict[tuple[str, ...], Any] = {}
        for key, value in raw_cfg.items():
            aliases = tuple(alias.strip() for alias in key.split(",") if alias.strip())
            parsed_cfg[aliases] = value
        self.configure(parsed_cfg)

    def configure(self, cfg: dict[Any, Any]) -> None:
        """
        Applies alias-to-keyword mappings.

        Keys are a word or a group of words, values a keyword token type. The
        update is all-or-nothing: if any entry is rejected, nothing is applied.

        Raises:
            MappingError: If
                - `cfg` is not a dict
                - a value is not a keyword token type name
                - a word is not a legal identifier, or is a boolean literal
                - a word is already bound to a different token type
        """
        if not isinstance(cfg, dict):
            raise MappingError("Configuration must be a dict")

        new_token_map: dict[str, str] = {}
        conflicts: list[str] = []

        for alias_group, sym in cfg.items():
            if not isinstance(sym, str) or sym not in KEYWORD_TOKENS:
                raise MappingError(f"Unknown keyword token name: {sym}")
            for alias in self._extract_aliases(alias_group):
                if not alias.isidentifier():
                    raise MappingError(f"Keyword must be an identifier: {alias!r}")
                if alias in boolean_literals:
                    raise MappingError(f"Cannot rebind boolean literal: {alias!r}")
                current = new_token_map.get(alias, self.token_map.get(alias))
                if current is not None and current != sym:
                    conflicts.append(
                        f"'{alias}' → conflict between {current} and {sym}"
                    )
                else:
                    new_token_map[alias] = sym

        if conflicts:
            raise MappingError("Keyword collision(s) detected", conflicts)

        self.token_map.update(new_token_map)

    def session_diff(self) -> dict[str, str]:
        """Returns the mappings that differ from the canonical reserved words."""
        return {
            alias: token
            for alias, token in self.token_map.items()
            if keyword_hashmap.get(alias) != token
        }


__all__ = ["KeywordMapper", "MappingError"]
