"""
Configuration for the translator.

Loaded from a JSON file by the command line (``--config``) or built in code.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FormatterConfig:
    """Configuration for the post-processing formatter."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    # Whether to respect magic trailing commas
    magic_trailing_comma: bool = True


@dataclass
class TranslatorConfig:
    """Configuration options for translation."""

    # Target language visitor ("python" or "visualize")
    target: str = "visualize"

    # Treat the input as a Markdown document with fenced code blocks
    markdown: bool = False

    # Fence languages to translate (empty = every non-empty tag except the target)
    source_languages: list[str] = field(default_factory=list)

    # Extra fully-qualified call targets mapped to target-language names
    builtin_functions: dict[str, str] = field(default_factory=dict)

    # Number of code blocks translated in parallel in Markdown mode
    jobs: int = 1

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    @staticmethod
    def from_dict(d: dict) -> TranslatorConfig:
        """Create a config from a dictionary."""
        config = TranslatorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "target": self.target,
            "markdown": self.markdown,
            "source_languages": self.source_languages,
            "builtin_functions": self.builtin_functions,
            "jobs": self.jobs,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
        }
