"""
Validation of the dump options bag for MySQL Dump Archiver.

Options are given with the short keys used in configuration files
(``file``, ``archive``, ``dump_type``, ...) and come out as a typed
:class:`DumpOptions`. Every check runs before any process is spawned.
"""

import os
from typing import Any, Mapping, Union

from .exceptions import FilesystemPreconditionError, ValidationError
from .models import DEFAULT_ARCHIVE_PATTERN, ArchiveTemplate, DumpMode, DumpOptions

# Raw option key -> DumpOptions field
OPTION_FIELDS = {
    'file': 'output_file',
    'mysqldump_bin': 'binary_path',
    'archive': 'archive_path',
    'archive_pattern': 'archive_command_template',
    'archive_pipe': 'archive_via_pipe',
    'hex_blob': 'redact_blobs_as_hex',
    'defaults_extra_file': 'defaults_file',
    'max_allowed_packet': 'max_packet_size',
    'dump_type': 'dump_mode',
    'selected_tables': 'selected_tables',
    'ignored_tables': 'excluded_tables',
}

DEFAULTS: dict[str, Any] = {
    'file': None,
    'mysqldump_bin': 'mysqldump',
    'archive': None,
    'archive_pattern': DEFAULT_ARCHIVE_PATTERN,
    'archive_pipe': False,
    'hex_blob': False,
    'defaults_extra_file': None,
    'max_allowed_packet': None,
    'dump_type': None,
    'selected_tables': [],
    'ignored_tables': [],
}


def validate_options(raw: Union[Mapping[str, Any], DumpOptions]) -> DumpOptions:
    """
    Normalize a raw options bag into DumpOptions.

    Raises:
        ValidationError: unknown key, wrong type, bad enum value or a
            missing cross-field dependency.
        FilesystemPreconditionError: the output directory or the defaults
            extra file does not exist.
    """
    if isinstance(raw, DumpOptions):
        raw = _to_raw(raw)
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Options must be a mapping, got {type(raw).__name__}")

    unknown = sorted(str(key) for key in set(raw) - set(OPTION_FIELDS))
    if unknown:
        raise ValidationError(
            f"Unknown option(s): {', '.join(unknown)}. "
            f"Allowed options: {', '.join(OPTION_FIELDS)}"
        )

    values = {**DEFAULTS, **raw}

    options = DumpOptions(
        output_file=_nullable_path(values, 'file'),
        binary_path=_string(values, 'mysqldump_bin'),
        archive_path=_nullable_path(values, 'archive'),
        archive_command_template=ArchiveTemplate(_string(values, 'archive_pattern')),
        archive_via_pipe=_boolean(values, 'archive_pipe'),
        redact_blobs_as_hex=_boolean(values, 'hex_blob'),
        defaults_file=_nullable_string(values, 'defaults_extra_file'),
        max_packet_size=_packet_size(values),
        dump_mode=_dump_mode(values),
        selected_tables=_string_list(values, 'selected_tables'),
        excluded_tables=_string_list(values, 'ignored_tables'),
    )

    _check_sink(options)
    _check_paths(options)
    return options


def _to_raw(options: DumpOptions) -> dict[str, Any]:
    raw = {key: getattr(options, name) for key, name in OPTION_FIELDS.items()}
    raw['archive_pattern'] = options.archive_command_template.pattern
    raw['dump_type'] = options.dump_mode.value if options.dump_mode else None
    return raw


def _string(values: Mapping[str, Any], key: str) -> str:
    value = values[key]
    if not isinstance(value, str):
        raise ValidationError(
            f'The option "{key}" with value {value!r} is expected to be of type "string"'
        )
    return value


def _nullable_string(values: Mapping[str, Any], key: str):
    if values[key] is None:
        return None
    return _string(values, key)


def _nullable_path(values: Mapping[str, Any], key: str):
    value = _nullable_string(values, key)
    if value == '':
        raise ValidationError(f'The option "{key}" must not be an empty string')
    return value


def _boolean(values: Mapping[str, Any], key: str) -> bool:
    value = values[key]
    if not isinstance(value, bool):
        raise ValidationError(
            f'The option "{key}" with value {value!r} is expected to be of type "bool"'
        )
    return value


def _string_list(values: Mapping[str, Any], key: str) -> list[str]:
    value = values[key]
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ValidationError(
            f'The option "{key}" with value {value!r} is expected to be of type "string[]"'
        )
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(
                f'The option "{key}" contains {item!r}, expected only strings'
            )
    return list(value)


def _packet_size(values: Mapping[str, Any]):
    value = values['max_allowed_packet']
    # YAML reads "64M" as a string but 1073741824 as an int
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _nullable_string(values, 'max_allowed_packet')


def _dump_mode(values: Mapping[str, Any]):
    value = values['dump_type']
    if value is None or isinstance(value, DumpMode):
        return value
    try:
        return DumpMode(value)
    except ValueError:
        allowed = ', '.join(f'"{mode.value}"' for mode in DumpMode)
        raise ValidationError(
            f'The option "dump_type" with value {value!r} is invalid. Accepted values are: {allowed}'
        ) from None


def _check_sink(options: DumpOptions) -> None:
    if options.output_file is None and options.archive_path is None:
        if not options.archive_via_pipe:
            raise ValidationError(
                '"file" option must be set when "archive" is not set and "archive_pipe" is false.'
            )
        raise ValidationError('"archive" option must be set when "file" is not set.')

    if options.output_file is None and not options.archive_via_pipe:
        raise ValidationError('"file" option must be set when "archive_pipe" is false.')


def _check_paths(options: DumpOptions) -> None:
    if options.output_file is not None:
        directory = os.path.dirname(options.output_file) or '.'
        if not os.path.isdir(directory):
            raise FilesystemPreconditionError(
                f'Directory "{directory}" does not exist for file value of "{options.output_file}".'
            )

    if options.defaults_file and not os.path.exists(options.defaults_file):
        raise FilesystemPreconditionError(
            f'Defaults extra file missing "{options.defaults_file}".'
        )
