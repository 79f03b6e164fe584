"""
Layout Configuration Manager
Handles loading and saving timeline layout sizing preferences.
"""

import json
import logging
import os

from timeline_layout.data.models import LayoutRequest

# Configure logger
logger = logging.getLogger(__name__)


class LayoutConfig:
    """
    Manages sizing constants for the timeline layout.

    Preferences are stored in the ``timeline_layout`` section of a JSON
    configuration file shared with the rest of the application. Popup and
    lane sizes are kept in rem and converted with ``rem_in_px``.
    """

    SECTION = 'timeline_layout'

    DEFAULT_CONFIG = {
        'popup_width_rem': 16,
        'popup_vertical_spacing_rem': 10.625,
        'swimlane_height_rem': 5,
        'rem_in_px': 16,
        'buffer_px': 10,
        'min_separation_ratio': 0.1,
        'resize_debounce_ms': 200
    }

    def __init__(self, config_file=None):
        """
        Initialize layout configuration manager.

        Args:
            config_file: Path to configuration file (optional)
        """
        self.config_file = config_file
        self.config = self.DEFAULT_CONFIG.copy()

        if config_file and os.path.exists(config_file):
            self.load()

    def load(self):
        """Load layout preferences from the configuration file."""
        if not self.config_file or not os.path.exists(self.config_file):
            return

        try:
            if os.path.getsize(self.config_file) == 0:
                return

            with open(self.config_file, 'r') as f:
                data = json.load(f)

            section = data.get(self.SECTION, {})
            for key in self.DEFAULT_CONFIG:
                if key in section:
                    self.config[key] = section[key]

        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"Error loading layout configuration from {self.config_file}: {e}")

    def save(self):
        """Save layout preferences, keeping other sections of the file."""
        if not self.config_file:
            return

        existing_data = {}
        if os.path.exists(self.config_file) and os.path.getsize(self.config_file) > 0:
            try:
                with open(self.config_file, 'r') as f:
                    existing_data = json.load(f)
            except json.JSONDecodeError:
                # File exists but is not valid JSON, start fresh
                existing_data = {}

        existing_data[self.SECTION] = self.config

        config_dir = os.path.dirname(self.config_file)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file, 'w') as f:
            json.dump(existing_data, f, indent=2)

        logger.debug(f"Saved layout configuration to {self.config_file}")

    def get(self, key):
        return self.config.get(key, self.DEFAULT_CONFIG.get(key))

    def set(self, key, value):
        """
        Set a preference and persist it.

        Args:
            key: Preference name (one of DEFAULT_CONFIG)
            value: New value

        Raises:
            KeyError: If the preference is unknown
        """
        if key not in self.DEFAULT_CONFIG:
            raise KeyError(f"Unknown layout preference: {key}")
        self.config[key] = value
        self.save()

    def reset_to_defaults(self):
        """Reset all preferences to defaults."""
        self.config = self.DEFAULT_CONFIG.copy()
        self.save()

    @property
    def rem_in_px(self):
        return self.get('rem_in_px')

    @property
    def popup_width_px(self):
        return self.get('popup_width_rem') * self.rem_in_px

    @property
    def popup_vertical_spacing_px(self):
        return self.get('popup_vertical_spacing_rem') * self.rem_in_px

    @property
    def swimlane_height_px(self):
        return self.get('swimlane_height_rem') * self.rem_in_px

    @property
    def buffer_px(self):
        return self.get('buffer_px')

    @property
    def min_separation_px(self):
        return self.popup_width_px * self.get('min_separation_ratio')

    @property
    def resize_debounce_ms(self):
        return int(self.get('resize_debounce_ms'))

    def build_request(self, events, timeline_width_px, entity_order=()):
        """
        Build a layout request using these sizing constants.

        Args:
            events: Positioned events, sorted by position
            timeline_width_px: Current axis width
            entity_order: Entity ids in swimlane row order

        Returns:
            LayoutRequest: Request ready to submit
        """
        return LayoutRequest(
            events=events,
            timeline_width_px=timeline_width_px,
            entity_order=entity_order,
            popup_width_px=self.popup_width_px,
            popup_vertical_spacing_px=self.popup_vertical_spacing_px,
            swimlane_height_px=self.swimlane_height_px,
            buffer_px=self.buffer_px,
            min_separation_px=self.min_separation_px
        )
