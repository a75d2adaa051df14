import math
import os
from configparser import ConfigParser, Error as ConfigParserError
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from base_classes import ConfigError
from core.models import (
    ColorRole,
    DisplaySettings,
    Palette,
    QuoteEntry,
    ResizeMode,
    ScalingFilter,
)
from utils.color_utils import parse_color

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
BUILTIN_SOURCE = '<built-in defaults>'

DEFAULT_SETTINGS: Dict[str, Dict[str, str]] = {
    'DEFAULT': {
        'quotes_file': 'quotes.ini',
        'assets_directory': 'assets',
        'user_config': '~/.config/quote-slides/config.ini',
    },
    'DISPLAY': {
        'target_width': '30',
        'target_height': '',
        'char_aspect': '0.5',
        'scaling_filter': 'catmullrom',
        'resize_mode': 'fit',
    },
    'NAVIGATION': {
        'wrap': 'false',
    },
    'UI': {
        'title': 'Anime Quotes',
        'show_instructions': 'true',
    },
    'COLORS': {},
    'LOG': {
        'active': 'false',
        'dir': 'logs',
        'format': 'json',
        'per_run': 'true',
    },
}

# Quote file keys: canonical name first, accepted aliases after
QUOTE_FIELDS: Dict[str, Tuple[str, ...]] = {
    'text': ('text', 'japanese'),
    'image': ('image',),
    'romaji': ('romaji', 'transliteration'),
    'translation': ('translation', 'quote'),
    'anime': ('anime',),
    'character': ('character',),
}
REQUIRED_QUOTE_FIELDS = ('text', 'image')

_TRUE = ('true', 'yes', 'on', '1')
_FALSE = ('false', 'no', 'off', '0')

E = TypeVar('E')


class ConfigManager:
    """
    Immutable configuration manager - reads the display config once and
    turns it and the quote file into the records the slideshow runs on
    """

    def __init__(self, config_file: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None):
        self.overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        self.warnings: List[Tuple[str, Dict[str, Any]]] = []
        self._sources: List[Tuple[str, ConfigParser]] = []
        self.base_config = self._load_configs(config_file)

    # --- Loading ----------------------------------------------------------
    def _load_configs(self, config_file: Optional[str] = None) -> ConfigParser:
        """
        Layer built-in defaults, the bundled config.ini, the user config and a custom file
        :param config_file: optional path to a custom configuration file, which must exist
        :return: ConfigParser object
        """
        config = self._new_parser()
        config.read_dict(DEFAULT_SETTINGS, source=BUILTIN_SOURCE)

        # The bundled defaults file is optional so an installed copy still runs
        default_config_file = os.path.join(APP_ROOT, 'config.ini')
        if os.path.isfile(default_config_file):
            self._read_into(config, default_config_file)

        user_config = config.get('DEFAULT', 'user_config', fallback='')
        if user_config:
            user_config = os.path.expanduser(user_config)
            if os.path.isfile(user_config):
                self._read_into(config, user_config)

        if config_file is not None:
            file = self.resolve_file_path(config_file)
            if file is None:
                raise ConfigError(config_file, '--conf', 'configuration file not found')
            self._read_into(config, file)

        return config

    @staticmethod
    def _new_parser() -> ConfigParser:
        return ConfigParser(interpolation=None)

    def _read_into(self, config: ConfigParser, path: str) -> None:
        own = self._new_parser()
        try:
            with open(path, encoding='utf-8-sig') as f:
                text = f.read()
            own.read_string(text, source=path)
            config.read_string(text, source=path)
        except OSError as e:
            raise ConfigError(path, None, f'could not read file: {e.strerror or e}') from e
        except UnicodeDecodeError as e:
            raise ConfigError(path, None, f'file is not valid UTF-8: {e.reason}') from e
        except ConfigParserError as e:
            raise ConfigError(path, None, f'invalid syntax: {e.message}') from e
        self._sources.append((path, own))

    def source_of(self, section: str, option: str) -> str:
        """Name the last file that set ``option``; built-in defaults otherwise."""
        for path, parser in reversed(self._sources):
            if section == 'DEFAULT':
                if option in parser.defaults():
                    return path
            elif parser.has_section(section) and option in parser.options(section):
                return path
        return BUILTIN_SOURCE

    def loaded_files(self) -> List[str]:
        return [path for path, _ in self._sources]

    # --- Raw access (used by the logging layer) --------------------------
    def get_option(self, section: str, option: str, fallback: Any = None) -> Any:
        try:
            return self.fix_values(self.base_config.get(section, option))
        except ConfigParserError:
            return fallback

    @staticmethod
    def fix_values(value: Any) -> Any:
        """Fix some values due to how they are stored and retrieved with ConfigParser"""
        if isinstance(value, str):
            value = value.strip()

            if value.startswith('~'):
                value = os.path.expanduser(value)

            if value.isdigit():
                return int(value)

            lower_value = value.lower()
            if lower_value in ('true', 'yes'):
                return True
            if lower_value in ('false', 'no'):
                return False

            if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                return value[1:-1]

        return value

    # --- Display settings --------------------------------------------------
    def load_settings(self) -> DisplaySettings:
        width = self._get_int('DISPLAY', 'target_width')
        height_raw = self._get_str('DISPLAY', 'target_height')
        if height_raw:
            height = self._get_int('DISPLAY', 'target_height')
        else:
            # Derive rows from the width; terminal cells are about twice as tall as wide
            aspect = self._get_float('DISPLAY', 'char_aspect')
            height = max(1, int(round(width * aspect)))

        wrap = self.overrides.get('wrap')
        if wrap is None:
            wrap = self._get_bool('NAVIGATION', 'wrap')

        return DisplaySettings(
            target_width=width,
            target_height=height,
            scaling_filter=self._get_enum('DISPLAY', 'scaling_filter', ScalingFilter),
            resize_mode=self._get_enum('DISPLAY', 'resize_mode', ResizeMode),
            palette=self._load_palette(),
            show_instructions=self._get_bool('UI', 'show_instructions'),
            title=self._get_str('UI', 'title') or DEFAULT_SETTINGS['UI']['title'],
            wrap=bool(wrap),
            assets_dir=self.assets_directory(),
        )

    def _load_palette(self) -> Palette:
        colors: Dict[ColorRole, str] = {}
        known = {role.value: role for role in ColorRole}
        inherited = set(self.base_config.defaults())
        for key in self.base_config.options('COLORS'):
            if key in inherited and not self._explicit('COLORS', key):
                continue
            raw = self.base_config.get('COLORS', key)
            role = known.get(key.strip().lower())
            if role is None:
                self._warn('unknown_color_role', section='COLORS', key=key, value=raw)
                continue
            parsed = parse_color(raw)
            if parsed is None:
                self._warn('invalid_color', section='COLORS', key=key, value=raw)
                continue
            colors[role] = parsed
        return Palette(colors)

    def _explicit(self, section: str, option: str) -> bool:
        return any(p.has_section(section) and option in p.options(section) and option not in p.defaults()
                   for _, p in self._sources)

    def _warn(self, kind: str, **details: Any) -> None:
        details['file'] = self.source_of(details.get('section', 'DEFAULT'), details.get('key', ''))
        self.warnings.append((kind, details))

    def _error(self, section: str, option: str, message: str) -> ConfigError:
        return ConfigError(self.source_of(section, option), f'[{section}].{option}', message)

    def _get_str(self, section: str, option: str) -> str:
        value = self.base_config.get(section, option, fallback='')
        return self._unquote(value.strip())

    def _get_int(self, section: str, option: str, minimum: int = 1) -> int:
        raw = self._get_str(section, option)
        try:
            value = int(raw)
        except ValueError:
            raise self._error(section, option, f'expected an integer, got {raw!r}') from None
        if value < minimum:
            raise self._error(section, option, f'must be at least {minimum}, got {value}')
        return value

    def _get_float(self, section: str, option: str) -> float:
        raw = self._get_str(section, option)
        try:
            value = float(raw)
        except ValueError:
            raise self._error(section, option, f'expected a number, got {raw!r}') from None
        if not (value > 0 and math.isfinite(value)):
            raise self._error(section, option, f'must be greater than 0, got {raw}')
        return value

    def _get_bool(self, section: str, option: str) -> bool:
        raw = self._get_str(section, option).lower()
        if raw in _TRUE:
            return True
        if raw in _FALSE:
            return False
        raise self._error(section, option, f'expected true or false, got {raw!r}')

    def _get_enum(self, section: str, option: str, enum_cls: Type[E]) -> E:
        raw = self._get_str(section, option).lower()
        try:
            return enum_cls(raw)
        except ValueError:
            choices = ', '.join(member.value for member in enum_cls)
            raise self._error(section, option, f'unknown value {raw!r} (expected one of: {choices})') from None

    @staticmethod
    def _unquote(value: str) -> str:
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            return value[1:-1]
        return value

    # --- Quote file ----------------------------------------------------------
    def quotes_path(self) -> str:
        """Absolute path to the quote file; raises ConfigError when it cannot be found"""
        name = self.overrides.get('quotes_file') or self._get_str('DEFAULT', 'quotes_file')
        if not name:
            raise self._error('DEFAULT', 'quotes_file', 'no quote file configured')
        path = self.resolve_file_path(name, (os.getcwd(), APP_ROOT))
        if path is None:
            origin = '--quotes' if self.overrides.get('quotes_file') else '[DEFAULT].quotes_file'
            raise ConfigError(name, origin, 'quote file not found')
        return os.path.abspath(path)

    def assets_directory(self) -> str:
        """Assets directory, relative paths resolved against the quote file's directory"""
        name = self.overrides.get('assets_directory') or self._get_str('DEFAULT', 'assets_directory') or '.'
        name = os.path.expanduser(name)
        if os.path.isabs(name):
            return name
        if self.overrides.get('assets_directory'):
            return os.path.abspath(name)
        try:
            base = os.path.dirname(self.quotes_path())
        except ConfigError:
            base = os.getcwd()
        return os.path.abspath(os.path.join(base, name))

    def load_quotes(self) -> Tuple[QuoteEntry, ...]:
        path = self.quotes_path()
        # Quote text may contain ":", so only "=" separates keys from values
        parser = ConfigParser(interpolation=None, delimiters=("=",))
        try:
            with open(path, encoding='utf-8-sig') as f:
                parser.read_file(f, source=path)
        except OSError as e:
            raise ConfigError(path, None, f'could not read file: {e.strerror or e}') from e
        except UnicodeDecodeError as e:
            raise ConfigError(path, None, f'file is not valid UTF-8: {e.reason}') from e
        except ConfigParserError as e:
            raise ConfigError(path, None, f'invalid syntax: {e.message}') from e

        entries = tuple(self._quote_from_section(path, parser, section) for section in parser.sections())
        if not entries:
            raise ConfigError(path, 'quotes', 'no quotes defined (at least one section is required)')
        return entries

    def _quote_from_section(self, path: str, parser: ConfigParser, section: str) -> QuoteEntry:
        values: Dict[str, Optional[str]] = {}
        for field_name, keys in QUOTE_FIELDS.items():
            values[field_name] = self._first_value(parser, section, keys)
            if field_name in REQUIRED_QUOTE_FIELDS:
                if values[field_name] is None:
                    raise ConfigError(path, f'[{section}].{field_name}', 'missing required field')
                if not values[field_name]:
                    raise ConfigError(path, f'[{section}].{field_name}', 'required field is empty')
        return QuoteEntry(
            text=values['text'],
            image=values['image'],
            romaji=values['romaji'] or None,
            translation=values['translation'] or None,
            anime=values['anime'] or None,
            character=values['character'] or None,
            source=section,
        )

    @classmethod
    def _first_value(cls, parser: ConfigParser, section: str, keys: Sequence[str]) -> Optional[str]:
        for key in keys:
            if parser.has_option(section, key):
                return cls._unquote(parser.get(section, key).strip())
        return None

    # --- Paths ------------------------------------------------------------------
    @staticmethod
    def resolve_file_path(file_name: Optional[str], base_dirs: Optional[Sequence[str]] = None) -> Optional[str]:
        """
        Works out the path to a file based on the filename and candidate base directories
        :param file_name: name of the file to resolve the path to
        :param base_dirs: directories tried in order for relative names (default: the CWD)
        :return: path to the file or None
        """
        if not file_name:
            return None
        file_name = os.path.expanduser(file_name)
        if os.path.isabs(file_name):
            return file_name if os.path.isfile(file_name) else None
        for base_dir in (base_dirs or (os.getcwd(),)):
            full_path = os.path.join(base_dir, file_name)
            if os.path.isfile(full_path):
                return full_path
        return None
