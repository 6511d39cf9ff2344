# --- rlayout_lib/config.py ---
import configparser
import logging
from dataclasses import dataclass, fields
from types import MappingProxyType

from .constants import (
    CONTACT_FONT_SIZE,
    CONTACT_REGION_LIMIT,
    DESCRIPTOR_BOLD_SIZE,
    ENTRY_SCAN_LINES,
    HEADER_MAX_LENGTH,
    LINE_TOLERANCE,
    REGION_BOLD_SIZE,
    REGION_GAP_THRESHOLD,
    WORD_SPACE_GAP,
)

log = logging.getLogger("rlayout.config")


@dataclass(frozen=True)
class AnalyzerSettings:
    """Tunable thresholds of the layout engine."""

    line_tolerance: float = LINE_TOLERANCE
    region_gap: float = REGION_GAP_THRESHOLD
    space_gap: float = WORD_SPACE_GAP
    bold_size: float = REGION_BOLD_SIZE
    font_bold_size: float = DESCRIPTOR_BOLD_SIZE
    header_max_length: int = HEADER_MAX_LENGTH
    contact_region_limit: int = CONTACT_REGION_LIMIT
    contact_font_size: float = CONTACT_FONT_SIZE
    education_scan_lines: int = ENTRY_SCAN_LINES["education"]
    experience_scan_lines: int = ENTRY_SCAN_LINES["experience"]
    projects_scan_lines: int = ENTRY_SCAN_LINES["projects"]
    max_workers: int = 1

    @property
    def scan_lines(self):
        return MappingProxyType(
            {
                "education": self.education_scan_lines,
                "experience": self.experience_scan_lines,
                "projects": self.projects_scan_lines,
            }
        )


# INI section for each settings field.
SETTINGS_SECTIONS = {
    "Layout": ("line_tolerance", "region_gap", "space_gap", "bold_size", "font_bold_size"),
    "Sections": (
        "header_max_length",
        "contact_region_limit",
        "contact_font_size",
        "education_scan_lines",
        "experience_scan_lines",
        "projects_scan_lines",
    ),
    "Analysis": ("max_workers",),
}


class ConfigService:
    """Manages reading from and writing to the rlayout.cfg file."""

    def __init__(self, config_path: str):
        self.config_path = config_path
        defaults = AnalyzerSettings()
        self.defaults = {
            section: {key: str(getattr(defaults, key)) for key in keys}
            for section, keys in SETTINGS_SECTIONS.items()
        }

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser()
        for section, values in self.defaults.items():
            config[section] = values

        if not config.read(self.config_path):
            log.info("Config file not found at %s. Creating with defaults.", self.config_path)
            self.save_settings(self._config_to_dict(config))

        return self._config_to_dict(config)

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser()
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            with open(self.config_path, "w") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)

    def load_analyzer_settings(self) -> AnalyzerSettings:
        """Builds AnalyzerSettings from the file; bad values fall back to defaults."""
        settings = self.get_settings()
        defaults = AnalyzerSettings()
        types = {f.name: type(f.default) for f in fields(AnalyzerSettings)}
        values = {}
        for section, keys in SETTINGS_SECTIONS.items():
            for key in keys:
                raw = settings.get(section, {}).get(key)
                try:
                    value = types[key](raw)
                except (TypeError, ValueError):
                    log.warning(
                        "Invalid value %r for [%s] %s, using default %s.",
                        raw, section, key, getattr(defaults, key),
                    )
                    continue
                if value <= 0:
                    log.warning(
                        "[%s] %s must be positive, using default %s.",
                        section, key, getattr(defaults, key),
                    )
                    continue
                values[key] = value
        log.debug("Analyzer settings: %s", values)
        return AnalyzerSettings(**values)

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}
