import os
import logging
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")

DEFAULT_SITE_URL = "https://web-central.appspot.com/web/"
DEFAULT_SPREADSHEET_ID = "1ObBKWXu0KQ7yaew8VvG-eArXXyIX64sSSseXRZRADuU"
DEFAULT_USER_AGENT = (
	"Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12_6) AppleWebKit/537.36 "
	"(KHTML, like Gecko) Chrome/63.0.3239.30 Safari/537.36"
)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_bool_env(name: str, default: bool) -> bool:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	value = raw.strip().lower()
	if value in _TRUE_VALUES:
		return True
	if value in _FALSE_VALUES:
		return False
	logging.warning("Invalid %s: %r; using %s", name, raw, default)
	return default


def home_dir() -> str:
	"""Home directory used for the OAuth token cache.

	Checked in order: HOME, HOMEPATH, USERPROFILE.
	"""
	for name in ("HOME", "HOMEPATH", "USERPROFILE"):
		value = os.getenv(name)
		if value:
			return value
	return os.path.expanduser("~")


def token_path() -> str:
	return os.path.join(home_dir(), ".credentials", "sheets.googleapis.com-blc.json")
