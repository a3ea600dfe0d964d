"""Preference documents — the key/value trees written to each preference plist.

Every builder returns a fresh dict. Values are restricted to what the binary
plist encoders handle here: ``bool``, ``str``, ``list[str]`` and nested dicts.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

from simsettings.errors import TemplateUnavailable

PreferenceDocument = dict[str, Any]
TemplateLoader = Callable[[], PreferenceDocument]

_DEFAULT_TEMPLATE = Path(__file__).parent.parent / "data" / "global_preferences.json"


def load_global_preferences_template(path: Path | None = None) -> PreferenceDocument:
    """Load the baseline ``.GlobalPreferences`` keys shipped with the package."""
    template = path or _DEFAULT_TEMPLATE
    try:
        with open(template, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise TemplateUnavailable(f"Global preferences template not found: {template}", cause=e) from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise TemplateUnavailable(f"Malformed global preferences template {template}: {e}", cause=e) from e
    except OSError as e:
        raise TemplateUnavailable(f"Cannot read global preferences template {template}: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise TemplateUnavailable(
            f"Global preferences template {template} must be a JSON object, got {type(data).__name__}"
        )
    return data


def build_locale_document(
    template_loader: TemplateLoader, locale: str, language: str
) -> PreferenceDocument:
    """
    Template keys with the locale overridden.

    ``AppleLanguages`` becomes ``[language]`` and ``AppleLocale`` becomes
    ``locale``; whatever the template held for those two keys is replaced.
    """
    document = json.loads(json.dumps(template_loader()))  # deep copy, loader may cache
    document["AppleLanguages"] = [language]
    document["AppleLocale"] = locale
    return document


def build_keyboard_document() -> PreferenceDocument:
    """Keyboard settings that leave typed text untouched."""
    return {
        "KeyboardAutocapitalization": False,
        "KeyboardAutocorrection": False,
        "KeyboardCapsLock": False,
        "KeyboardCheckSpelling": False,
    }


def build_browser_warning_document() -> PreferenceDocument:
    return {"WarnAboutFraudulentWebsites": False}


def build_location_document(bundle_id: str, authorized: bool) -> PreferenceDocument:
    """
    Location clients document granting (or denying) one app.

    The result holds only *bundle_id*: writing it replaces the whole clients
    file, so grants for other apps do not survive.
    """
    return {
        bundle_id: {
            "Whitelisted": False,
            "BundleId": bundle_id,
            "Authorized": bool(authorized),
        }
    }
