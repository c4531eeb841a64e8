"""Business logic for site options (key/type/value settings)."""
import logging
from typing import Optional


class OptionService:
    """Reads site options, delegating persistence to the ``database``
    module's helper functions.

    All methods accept a *db* SQLAlchemy session as the first argument so
    that callers (Flask route handlers) control the session lifecycle.
    """

    def __init__(self, db_module) -> None:
        """
        Args:
            db_module: The imported ``database`` module (or any object that
                exposes ``get_option`` and ``set_option``).
        """
        self._db = db_module
        self._log = logging.getLogger('playhub.service.OptionService')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, db, key: str, option_type: str = 'general',
            default: Optional[str] = None) -> Optional[str]:
        """Return the value of option *key* of *option_type*, or *default*."""
        value = self._db.get_option(db, key, option_type)
        return default if value is None else value

    def get_int(self, db, key: str, option_type: str = 'general',
                default: Optional[int] = None) -> Optional[int]:
        """Return option *key* as a positive int.

        Missing, non-numeric and non-positive values yield *default*; the
        latter two are logged because they indicate a misconfigured option.
        """
        raw = self._db.get_option(db, key, option_type)
        if raw is None or str(raw).strip() == '':
            return default
        try:
            value = int(str(raw).strip())
        except ValueError:
            self._log.warning("Option %s/%s is not an integer: %r", option_type, key, raw)
            return default
        if value <= 0:
            self._log.warning("Option %s/%s must be positive, got %d", option_type, key, value)
            return default
        return value

    def set(self, db, key: str, value, option_type: str = 'general') -> bool:
        """Create or update option *key*.  Returns ``True`` on success."""
        return self._db.set_option(db, key, value, option_type)
