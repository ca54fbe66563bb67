"""Readiness checks: config, packages, Firebase credentials."""
import logging

logger = logging.getLogger(__name__)

# Result: (passed: bool, message: str)
CheckResult = tuple[bool, str]
ChecksDict = dict[str, CheckResult]

REQUIRED_CHECKS = ("config", "packages")


def check_config() -> CheckResult:
    """Load settings and read the keys the pipeline depends on."""
    try:
        from chatpush.settings import get_settings
        s = get_settings()
        _ = s.users_collection
        _ = s.device_token_field
        _ = s.multicast_batch_size
        return True, "ok"
    except Exception as e:
        return False, str(e)


def check_packages() -> CheckResult:
    """Import critical modules: firebase_admin, fastapi, chatpush.main."""
    missing = []
    try:
        import firebase_admin  # noqa: F401
        from firebase_admin import messaging  # noqa: F401
    except ImportError:
        missing.append("firebase_admin")
    try:
        import fastapi  # noqa: F401
    except ImportError:
        missing.append("fastapi")
    try:
        import chatpush.main  # noqa: F401
    except ImportError as e:
        missing.append(f"chatpush.main ({e})")
    if missing:
        return False, f"missing: {', '.join(missing)}"
    return True, "ok"


def check_firebase() -> CheckResult:
    """Initialise the Firebase app when push is enabled; skip otherwise."""
    try:
        from chatpush.settings import get_settings
        if not get_settings().push_enabled:
            return True, "skipped (push disabled)"
        from chatpush.infra.firebase import get_firebase_app
        app = get_firebase_app()
        return True, f"ok (project={app.project_id or 'default'})"
    except Exception as e:
        return False, str(e)


def run_all_checks() -> ChecksDict:
    """Run all readiness checks. Returns dict of check_name -> (passed, message)."""
    return {
        "config": check_config(),
        "packages": check_packages(),
        "firebase": check_firebase(),
    }


def is_ready(checks: ChecksDict | None = None) -> tuple[bool, dict[str, str]]:
    """
    True if all required checks pass. Optional checks (firebase) only show up in the summary.
    Returns (ready, summary of name -> "ok" | "skipped ..." | error message).
    """
    if checks is None:
        checks = run_all_checks()
    summary = {name: msg for name, (_passed, msg) in checks.items()}
    ready = all(checks[n][0] for n in REQUIRED_CHECKS if n in checks)
    if not ready:
        logger.warning("Not ready: %s", summary)
    return ready, summary
