from flask import flash, has_request_context, current_app, has_app_context


def toast(description, title="Success", variant="default"):
    """Transient user-visible status report. Outside a request it only logs."""
    category = "danger" if variant == "destructive" else "success"
    if has_request_context():
        flash(f"{title}: {description}", category)
    elif has_app_context():
        log = current_app.logger.warning if category == "danger" else current_app.logger.info
        log(f"{title}: {description}")
