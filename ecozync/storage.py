# ecozync/storage.py
# Device-local cache for visitors without an account: form state, the last
# result, a short history and a calculation waiting to be saved after sign-in.
# Failures are logged and reported as "nothing stored"; they never reach the UI.
import json
import logging
from datetime import datetime, timedelta
from threading import Lock

from .config import settings

logger = logging.getLogger(__name__)

DATA_DIR = settings.data_dir
HISTORY_LIMIT = settings.anonymous_history_limit
PENDING_TTL = timedelta(minutes=settings.pending_calculation_ttl_minutes)

ASSESSMENT_DATA = "ecozync_assessment_data.json"
LAST_CALCULATION = "ecozync_last_calculation.json"
CALCULATION_HISTORY = "ecozync_calculation_history.json"
PENDING_CALCULATION = "ecozync_pending_calculation.json"
ALL_KEYS = (ASSESSMENT_DATA, LAST_CALCULATION, CALCULATION_HISTORY)

lock = Lock()

def _path(name):
    return DATA_DIR / name

def _read(name, default=None):
    p = _path(name)
    if not p.exists():
        return default
    try:
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read %s: %s", name, e)
        return default

def _write(name, obj):
    try:
        with lock:
            DATA_DIR.mkdir(parents=True, exist_ok=True)
            with _path(name).open("w", encoding="utf-8") as f:
                json.dump(obj, f, ensure_ascii=False, indent=2, default=str)
    except (OSError, TypeError) as e:
        logger.warning("Failed to write %s: %s", name, e)

def _remove(name):
    try:
        with lock:
            _path(name).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove %s: %s", name, e)

def _now():
    return datetime.utcnow().isoformat()

def _record(results, assessment_data):
    return {"date": _now(), "results": results, "assessment_data": assessment_data}

# Form state
def save_assessment_data(data): _write(ASSESSMENT_DATA, data)
def get_assessment_data(): return _read(ASSESSMENT_DATA)
def clear_assessment_data(): _remove(ASSESSMENT_DATA)

# Results
def save_last_calculation(results, assessment_data):
    _write(LAST_CALCULATION, _record(results, assessment_data))

def get_last_calculation():
    return _read(LAST_CALCULATION)

def get_calculation_history():
    history = _read(CALCULATION_HISTORY, [])
    return history if isinstance(history, list) else []

def save_to_history(results, assessment_data):
    history = [_record(results, assessment_data)] + get_calculation_history()
    _write(CALCULATION_HISTORY, history[:HISTORY_LIMIT])

def save_calculation(results, assessment_data):
    save_last_calculation(results, assessment_data)
    save_to_history(results, assessment_data)

def clear_all_data():
    for name in ALL_KEYS:
        _remove(name)

def has_stored_data():
    return _path(LAST_CALCULATION).exists() or _path(CALCULATION_HISTORY).exists()

def storage_stats():
    last = get_last_calculation()
    return {
        "calculations": len(get_calculation_history()),
        "last_calculation_date": last.get("date") if last else None,
    }

# Pending calculation, saved to the account once the visitor signs in
def store_pending_calculation(results, assessment_data):
    _write(PENDING_CALCULATION, {"results": results, "assessment_data": assessment_data, "timestamp": _now()})
    logger.info("Stored pending calculation for post-login save")

def clear_pending_calculation():
    _remove(PENDING_CALCULATION)

def get_pending_calculation(now=None):
    pending = _read(PENDING_CALCULATION)
    if not pending:
        return None
    try:
        stored_at = datetime.fromisoformat(pending["timestamp"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Discarding malformed pending calculation")
        clear_pending_calculation()
        return None
    if stored_at < (now or datetime.utcnow()) - PENDING_TTL:
        clear_pending_calculation()
        return None
    return pending

def has_pending_calculation():
    return get_pending_calculation() is not None
